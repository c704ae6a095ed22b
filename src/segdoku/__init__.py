"""Board generation core for segment-divided Latin puzzles."""

from .board import generate_board, generate_solution
from .difficulty import get_difficulty, get_size, percentage_help
from .errors import (
    AssignmentUnsolvable,
    GenerationFailed,
    InvalidSize,
    LayoutInfeasible,
    MalformedSaveData,
    SegdokuError,
)
from .model import Board, Solution, create_board_map
from .rng import RNG, LcgRNG, create_rng
from .savegame import export_save_game, import_save_game, is_save_game_valid
from .solver_core import solve

__all__ = [
    "Board",
    "Solution",
    "RNG",
    "LcgRNG",
    "create_rng",
    "create_board_map",
    "generate_board",
    "generate_solution",
    "get_difficulty",
    "get_size",
    "percentage_help",
    "solve",
    "is_save_game_valid",
    "import_save_game",
    "export_save_game",
    "SegdokuError",
    "LayoutInfeasible",
    "AssignmentUnsolvable",
    "InvalidSize",
    "MalformedSaveData",
    "GenerationFailed",
]
