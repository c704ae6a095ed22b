"""Top-level board generation interface.

Expose `generate(seed, difficulty)` and `handle_generation_request(request)`,
the message-shaped entry point a background worker calls with
`{"seed": ..., "difficulty": ...}` or `{"seed": ..., "level": ...}`.
"""

from typing import Any, Dict, Optional, Tuple

from src.segdoku.board import DEFAULT_MAX_ATTEMPTS, generate_board
from src.segdoku.difficulty import get_difficulty
from src.segdoku.errors import SegdokuError
from src.segdoku.model import Board, Solution
from src.segdoku.rng import create_rng
from src.utils.trace import Tracer


def generate(
    seed: int,
    difficulty: int,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    tracer: Optional[Tracer] = None,
) -> Tuple[Board, Solution]:
    """
    Same seed and difficulty always yield the same board and solution.
    Tracing is off unless a tracer is passed in; this runs once per request in
    long-lived workers.
    """
    tracer = tracer or Tracer(enabled=False)
    return generate_board(difficulty, create_rng(seed), max_attempts=max_attempts, tracer=tracer)


def resolve_difficulty(request: Dict[str, Any]) -> int:
    if request.get("difficulty") is not None:
        return request["difficulty"]
    if request.get("level") is not None:
        return get_difficulty(request["level"])
    raise ValueError("Request needs either 'difficulty' or 'level'")


def handle_generation_request(request: Dict[str, Any]) -> Dict[str, Any]:
    """
    Run one generation request. Returns {"board", "solution"} as plain
    dictionaries on success, {"error": message} otherwise.
    """
    try:
        if not isinstance(request, dict):
            raise TypeError("Generation request must be a dictionary")
        seed = request.get("seed")
        if isinstance(seed, bool) or not isinstance(seed, int):
            raise ValueError(f"Request seed must be an integer, got {seed!r}")
        difficulty = resolve_difficulty(request)
        max_attempts = request.get("max_attempts", DEFAULT_MAX_ATTEMPTS)
        board, solution = generate(seed, difficulty, max_attempts=max_attempts)
    except (SegdokuError, ValueError, TypeError) as e:
        return {"error": str(e)}

    return {"board": board.to_dict(), "solution": solution.to_dict()}


__all__ = ["generate", "handle_generation_request", "resolve_difficulty"]
