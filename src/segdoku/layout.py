"""Recursive backtracking placement of row/column segment dividers."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from src.utils.trace import Tracer, get_tracer

from .errors import InvalidSize, LayoutInfeasible
from .model import Segments
from .rng import RNG
from .validator import is_valid_layout

MIN_SIZE = 5


@dataclass
class LayoutState:
    """
    Segment sizes per row and column while dividers are being placed.
    `None` marks a line whose split has not been decided yet.
    """

    size: int
    rows: List[Optional[Segments]]
    columns: List[Optional[Segments]]

    @classmethod
    def empty(cls, size: int) -> "LayoutState":
        return cls(size=size, rows=[None] * size, columns=[None] * size)

    def next_open(self) -> Optional[Tuple[str, int]]:
        """Rows are decided before columns."""
        for index, segments in enumerate(self.rows):
            if segments is None:
                return "row", index
        for index, segments in enumerate(self.columns):
            if segments is None:
                return "column", index
        return None

    def _lines(self, axis: str) -> List[Optional[Segments]]:
        return self.rows if axis == "row" else self.columns

    def assign(self, axis: str, index: int, segments: Segments) -> None:
        self._lines(axis)[index] = segments

    def reset(self, axis: str, index: int) -> None:
        self._lines(axis)[index] = None

    def resolved(self) -> Tuple[List[Segments], List[Segments]]:
        """Layout with undecided lines treated as one full-length segment."""
        full = (self.size,)
        rows = [segments if segments is not None else full for segments in self.rows]
        columns = [segments if segments is not None else full for segments in self.columns]
        return rows, columns


def generate_layout(
    size: int, rng: RNG, tracer: Optional[Tracer] = None
) -> Tuple[Tuple[Segments, ...], Tuple[Segments, ...]]:
    """
    Partition every row and column of a `size` x `size` grid into either one
    full segment or exactly two segments, such that the layout passes
    `is_valid_layout`. Raises LayoutInfeasible when no such layout exists for
    the current RNG state.
    """
    if size < MIN_SIZE:
        raise InvalidSize(f"Size {size} is too small")
    tracer = tracer or get_tracer()

    indices = list(range(size))
    full_segments = max(size // 2 - 1 - rng.get_next(1), 2)
    full_rows = rng.shuffle(indices)[:full_segments]
    full_cols = rng.shuffle(indices)[:full_segments]

    state = LayoutState.empty(size)
    for r in full_rows:
        state.assign("row", r, (size,))
    for c in full_cols:
        state.assign("column", c, (size,))

    if not _place_dividers(state, rng, tracer):
        raise LayoutInfeasible(f"Unable to place dividers on a {size}x{size} board")

    rows, columns = state.resolved()
    return tuple(rows), tuple(columns)


def _place_dividers(state: LayoutState, rng: RNG, tracer: Tracer) -> bool:
    target = state.next_open()
    if target is None:
        return True
    axis, index = target
    line = f"{axis} {index}"

    splits = rng.shuffle([(k, state.size - k) for k in range(1, state.size)])
    for split in splits:
        state.assign(axis, index, split)

        valid = is_valid_layout(*state.resolved())
        tracer.log_layout_split(line, split, valid)
        if not valid:
            continue

        if _place_dividers(state, rng, tracer):
            return True

    state.reset(axis, index)
    tracer.log_layout_backtrack(line)
    return False
