"""Tests for clue minimization, force-fill, and difficulty re-fill."""

from src.segdoku import skeleton as sk
from src.segdoku.board import generate_board
from src.segdoku.model import Board, create_board_map
from src.segdoku.rng import create_rng
from src.segdoku.solver_core import get_valid_options, solve


def _count_completions(board_map, values, limit=2):
    """Exhaustive completion counter, stops once `limit` completions are seen."""
    values = list(values)
    blanks = [i for i, v in enumerate(values) if v == 0]
    if not blanks:
        return 1
    cell = min(blanks, key=lambda i: len(get_valid_options(i, board_map, values)))
    count = 0
    for value in get_valid_options(cell, board_map, values):
        values[cell] = value
        count += _count_completions(board_map, values, limit - count)
        values[cell] = 0
        if count >= limit:
            break
    return count


def _generated(difficulty=1, seed=42):
    board, solution = generate_board(difficulty, create_rng(seed))
    return board, create_board_map(board), solution


def test_minimized_skeleton_has_unique_completion():
    board, board_map, solution = _generated()
    minimized = sk.minimize_skeleton(board_map, solution.solution, range(board.cellcount))

    assert _count_completions(board_map, minimized) == 1
    assert solve(board_map, minimized) == list(solution.solution)


def test_every_kept_clue_is_required():
    board, board_map, solution = _generated(seed=7)
    minimized = sk.minimize_skeleton(board_map, solution.solution, range(board.cellcount))

    for cell, value in enumerate(minimized):
        if value == 0:
            continue
        trial = list(minimized)
        trial[cell] = 0
        assert _count_completions(board_map, trial) >= 2, f"clue at {cell} is redundant"


def test_minimize_keeps_true_values_only():
    board, board_map, solution = _generated(seed=3)
    minimized = sk.minimize_skeleton(board_map, solution.solution, range(board.cellcount))
    for kept, true_value in zip(minimized, solution.solution):
        assert kept in (0, true_value)


def test_isolated_cell_detection():
    board = Board(
        size=5,
        rows=[[1, 4], [5], [5], [5], [5]],
        columns=[[1, 4], [5], [5], [5], [4, 1]],
    )
    assert sk.is_isolated_cell(board, 0, 0)
    assert not sk.is_isolated_cell(board, 0, 1)
    assert not sk.is_isolated_cell(board, 1, 0)
    # Column 4 ends at row 4 but row 4 spans the whole line.
    assert not sk.is_isolated_cell(board, 4, 4)


def test_force_fill_reveals_isolated_cells():
    board = Board(size=5, rows=[[1, 4], [5], [5], [5], [5]], columns=[[1, 4], [5], [5], [5], [5]])
    solution = list(range(1, 26))
    skeleton = sk.force_fill_isolated(board, solution, [0] * 25)
    assert skeleton[0] == 1
    assert skeleton.count(0) == 24


def test_refill_reaches_target_share():
    solution = [(i % 5) + 1 for i in range(25)]
    skeleton = sk.refill_for_difficulty(solution, [0] * 25, 1, create_rng(5))
    filled = [i for i, v in enumerate(skeleton) if v]
    assert len(filled) == 7  # floor(25 * 30%)
    assert all(skeleton[i] == solution[i] for i in filled)


def test_refill_at_highest_difficulty():
    solution = [(i % 5) + 1 for i in range(25)]
    skeleton = sk.refill_for_difficulty(solution, [0] * 25, 9, create_rng(5))
    assert sum(1 for v in skeleton if v) == 1  # floor(25 * 5%)


def test_refill_never_removes_clues():
    solution = [(i % 5) + 1 for i in range(25)]
    skeleton = sk.refill_for_difficulty(solution, list(solution), 1, create_rng(5))
    assert skeleton == solution


def test_build_skeleton_is_solvable_to_solution():
    board, board_map, solution = _generated(seed=11)
    skeleton = sk.build_skeleton(board, board_map, solution.solution, 1, create_rng(2))
    assert _count_completions(board_map, skeleton) == 1
    assert solve(board_map, skeleton) == list(solution.solution)
