"""Board generation pipeline: layout, full solution, skeleton, with bounded retries."""

from typing import Optional, Tuple

from src.utils.trace import Tracer, get_tracer

from .difficulty import check_difficulty, get_size
from .errors import AssignmentUnsolvable, GenerationFailed, RetryableGenerationError
from .layout import generate_layout
from .model import Board, Solution, create_board_map
from .rng import MAX_SAFE_INTEGER, RNG, create_rng
from .skeleton import build_skeleton
from .solver_core import solve

DEFAULT_MAX_ATTEMPTS = 100


def generate_solution(
    board: Board, difficulty: int, rng: RNG, tracer: Optional[Tracer] = None
) -> Solution:
    tracer = tracer or get_tracer()
    board_map = create_board_map(board)

    result = solve(board_map, [0] * board.cellcount, tracer)
    if result is None:
        raise AssignmentUnsolvable("Unsolvable board")

    skeleton = build_skeleton(board, board_map, result, difficulty, rng, tracer)
    return Solution(solution=result, skeleton=skeleton)


def generate_board(
    difficulty: int,
    rng: RNG,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    tracer: Optional[Tracer] = None,
) -> Tuple[Board, Solution]:
    """
    Generate a board and its solution for `difficulty`. Every attempt runs on
    its own sub-seeded RNG, so a failed layout or solve is retried with a
    different layout. Raises GenerationFailed after `max_attempts` attempts.
    """
    check_difficulty(difficulty)
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    tracer = tracer or get_tracer()
    size = get_size(difficulty)

    last_error: Optional[RetryableGenerationError] = None
    for attempt in range(1, max_attempts + 1):
        seeded_rng = create_rng(rng.get_next(MAX_SAFE_INTEGER))
        try:
            rows, columns = generate_layout(size, seeded_rng, tracer)
            board = Board(size=size, rows=rows, columns=columns)
            return board, generate_solution(board, difficulty, seeded_rng, tracer)
        except RetryableGenerationError as e:
            last_error = e
            tracer.log_retry(attempt, str(e))

    raise GenerationFailed(
        f"No board for difficulty {difficulty} after {max_attempts} attempts: {last_error}"
    )
