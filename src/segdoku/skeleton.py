"""Derive the published clue set (skeleton) from a full solution.

The skeleton is built in three passes:

1. Minimize: visit every cell once in random order and blank it unless some
   other legal value for that cell still leads to a complete grid.
2. Force-fill cells that are fenced in on all four sides; they can only hold
   a 1 and showing them helps the player read the segment borders.
3. Re-fill random blanks until the clue share required by the difficulty is
   reached. This pass only ever adds clues.
"""

import math
from typing import List, Optional, Sequence

from src.utils.trace import Tracer, get_tracer

from .difficulty import percentage_help
from .model import Board, BoardMap
from .rng import RNG
from .solver_core import get_valid_options, solve


def minimize_skeleton(
    board_map: BoardMap,
    solution: Sequence[int],
    cell_order: Sequence[int],
    tracer: Optional[Tracer] = None,
) -> List[int]:
    tracer = tracer or get_tracer()
    skeleton = list(solution)

    for cell in cell_order:
        cell_value = skeleton[cell]

        skeleton[cell] = 0
        alternatives = [v for v in get_valid_options(cell, board_map, skeleton) if v != cell_value]
        if not alternatives:
            tracer.log_clue(cell, cell_value, kept=False)
            continue

        # Required as soon as any other value still admits a full completion.
        is_required = False
        for alternative in alternatives:
            skeleton[cell] = alternative
            if solve(board_map, skeleton, tracer) is not None:
                is_required = True
                break

        skeleton[cell] = cell_value if is_required else 0
        tracer.log_clue(cell, cell_value, kept=is_required)

    return skeleton


def _touches_borders(segments: Sequence[int], position: int) -> bool:
    at_start = at_end = False
    cursor = 0
    for size in segments:
        if position == cursor:
            at_start = True
        if position == cursor + size - 1:
            at_end = True
        cursor += size
    return at_start and at_end


def is_isolated_cell(board: Board, row: int, col: int) -> bool:
    """True when the cell is both start and end of its row- and column-segment."""
    return _touches_borders(board.rows[row], col) and _touches_borders(board.columns[col], row)


def force_fill_isolated(board: Board, solution: Sequence[int], skeleton: List[int]) -> List[int]:
    for row in range(board.size):
        for col in range(board.size):
            if is_isolated_cell(board, row, col):
                cell = board.cell_index(row, col)
                skeleton[cell] = solution[cell]
    return skeleton


def refill_for_difficulty(
    solution: Sequence[int], skeleton: List[int], difficulty: int, rng: RNG
) -> List[int]:
    cellcount = len(solution)
    blanks = rng.shuffle([cell for cell, value in enumerate(skeleton) if value == 0])

    expected_filled = math.floor(cellcount * (percentage_help(difficulty) / 100))
    current_filled = cellcount - len(blanks)
    to_fill = max(0, expected_filled - current_filled)

    for cell in blanks[:to_fill]:
        skeleton[cell] = solution[cell]
    return skeleton


def build_skeleton(
    board: Board,
    board_map: BoardMap,
    solution: Sequence[int],
    difficulty: int,
    rng: RNG,
    tracer: Optional[Tracer] = None,
) -> List[int]:
    cell_order = rng.shuffle(range(board.cellcount))
    skeleton = minimize_skeleton(board_map, solution, cell_order, tracer)
    force_fill_isolated(board, solution, skeleton)
    return refill_for_difficulty(solution, skeleton, difficulty, rng)
