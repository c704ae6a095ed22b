"""Exception hierarchy for board generation and save-game handling."""


class SegdokuError(Exception):
    """Base class for every error raised by the generator."""


class RetryableGenerationError(SegdokuError):
    """A single layout/solve attempt failed; a fresh sub-seed may succeed."""


class LayoutInfeasible(RetryableGenerationError):
    """The layout generator exhausted every split for the current seed."""


class AssignmentUnsolvable(RetryableGenerationError):
    """No digit assignment exists for the generated layout."""


class InvalidSize(SegdokuError, ValueError):
    """Requested board size is below the supported minimum."""


class MalformedSaveData(SegdokuError, ValueError):
    """A persisted save record failed structural validation."""


class GenerationFailed(SegdokuError):
    """The retry loop ran out of attempts without producing a board."""
