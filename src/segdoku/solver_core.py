"""Backtracking digit solver with forced-cell propagation and MRV branching.

Candidate sets are bitmasks: bit v set means digit v is still allowed. Each
segment keeps a used-value mask that is updated on every place/clear, so a
cell's candidates are `max_mask & ~(row_used | col_used)`.

A segment of length L holds exactly the digits 1..L (L distinct digits, none
above L). Two checks follow from that and only ever cut branches without a
completion, so the first solution found is unchanged:

- per digit v, the segments of length >= v on both axes must admit a perfect
  matching through cells that can hold v (checked once per layout);
- during search, every digit a segment still misses must be a candidate of
  one of its blank cells.
"""

from typing import List, Optional, Sequence, Tuple

from .model import Board, BoardMap, create_board_map
from src.utils.trace import Tracer, get_tracer

Values = List[int]


def mask_values(mask: int) -> List[int]:
    """Digits set in `mask`, ascending."""
    return [v for v in range(1, mask.bit_length()) if mask >> v & 1]


def _popcount(mask: int) -> int:
    return bin(mask).count("1")


class GridState:
    """Cell values plus per-segment used-value masks and the undo trail."""

    def __init__(self, board_map: BoardMap, values: Sequence[int]):
        self.values: Values = list(values)
        self.row_ids = [c.row_id for c in board_map]
        self.col_ids = [c.col_id for c in board_map]
        self.max_masks = [c.max_mask for c in board_map]
        self.segment_masks = board_map.segment_masks
        self.used = [0] * board_map.segment_count
        self.trail: List[int] = []
        self.filled = 0

        for cell, value in enumerate(self.values):
            if value:
                bit = 1 << value
                self.used[self.row_ids[cell]] |= bit
                self.used[self.col_ids[cell]] |= bit
                self.filled += 1

    def options(self, cell: int) -> int:
        used = self.used
        return self.max_masks[cell] & ~(used[self.row_ids[cell]] | used[self.col_ids[cell]])

    def place(self, cell: int, value: int) -> None:
        bit = 1 << value
        self.values[cell] = value
        self.used[self.row_ids[cell]] |= bit
        self.used[self.col_ids[cell]] |= bit
        self.filled += 1

    def clear(self, cell: int) -> None:
        # Only cells placed through `place` are cleared, so the bit is exclusively theirs.
        bit = ~(1 << self.values[cell])
        self.values[cell] = 0
        self.used[self.row_ids[cell]] &= bit
        self.used[self.col_ids[cell]] &= bit
        self.filled -= 1

    def undo(self, down_to: int) -> None:
        for cell in reversed(self.trail[down_to:]):
            self.clear(cell)
        del self.trail[down_to:]


def solve(
    board_map: BoardMap, values: Sequence[int], tracer: Optional[Tracer] = None
) -> Optional[Values]:
    """
    Complete a partially filled grid (0 = blank). Returns the completed values
    or None when no valid completion exists. `values` is never modified.
    """
    tracer = tracer or get_tracer()
    if not values_placeable(board_map):
        return None
    return _backtrack(GridState(board_map, values), tracer)


def solve_board(
    board: Board, values: Optional[Sequence[int]] = None, tracer: Optional[Tracer] = None
) -> Optional[Values]:
    if values is None:
        values = [0] * board.cellcount
    return solve(create_board_map(board), values, tracer)


def get_valid_options(cell: int, board_map: BoardMap, values: Sequence[int]) -> List[int]:
    segments = board_map[cell]
    used = 0
    for peer in segments.row_segment:
        used |= 1 << values[peer]
    for peer in segments.col_segment:
        used |= 1 << values[peer]
    return mask_values(segments.max_mask & ~used)


def values_placeable(board_map: BoardMap) -> bool:
    """Layout-level check, cached on the board map."""
    if board_map.placeable is None:
        board_map.placeable = all(
            _has_value_matching(board_map, value) for value in range(1, board_map.size + 1)
        )
    return board_map.placeable


def _has_value_matching(board_map: BoardMap, value: int) -> bool:
    rows = {c.row_id for c in board_map if len(c.row_segment) >= value}
    cols = {c.col_id for c in board_map if len(c.col_segment) >= value}
    if len(rows) != len(cols):
        return False

    edges = {}
    for c in board_map:
        if c.max_value >= value:
            edges.setdefault(c.row_id, []).append(c.col_id)

    match = {}

    def _augment(row_id, seen):
        for col_id in edges.get(row_id, ()):
            if col_id in seen:
                continue
            seen.add(col_id)
            if col_id not in match or _augment(match[col_id], seen):
                match[col_id] = row_id
                return True
        return False

    return all(_augment(row_id, set()) for row_id in sorted(rows))


def propagate(state: GridState, tracer: Optional[Tracer] = None) -> bool:
    """Commit every cell with a single option until none remain. False on a dead end."""
    values = state.values
    forced = 0
    changed = True
    while changed:
        changed = False
        for cell in range(len(values)):
            if values[cell]:
                continue
            mask = state.options(cell)
            if not mask:
                return False
            if not mask & (mask - 1):
                state.place(cell, mask.bit_length() - 1)
                state.trail.append(cell)
                forced += 1
                changed = True

    if forced and tracer is not None:
        tracer.log_propagation(forced=forced, filled_count=state.filled)
    return True


def _backtrack(state: GridState, tracer: Tracer) -> Optional[Values]:
    if not propagate(state, tracer):
        return None

    choice = _select_unfilled_cell(state)
    if choice is None:
        tracer.log_solution_found(filled_count=state.filled)
        return state.values
    cell, mask = choice
    if not mask:
        tracer.log_backtrack(cell, reason="A cell or segment has no options left")
        return None

    options = mask_values(mask)
    for value in options:
        state.place(cell, value)
        tracer.log_assign(cell=cell, value=value, option_count=len(options), filled_count=state.filled)

        trail_size = len(state.trail)
        result = _backtrack(state, tracer)
        if result is not None:
            return result
        state.undo(trail_size)
        state.clear(cell)

    tracer.log_backtrack(cell)
    return None


def _select_unfilled_cell(state: GridState) -> Optional[Tuple[int, int]]:
    """
    Minimum Remaining Values: the blank cell with the fewest options, first
    wins ties. Returns (cell, 0) on a dead end.
    """
    values = state.values
    coverage = [0] * len(state.used)
    best = None
    best_mask = 0
    best_count = 0
    for cell in range(len(values)):
        if values[cell]:
            continue
        mask = state.options(cell)
        if not mask:
            return cell, 0
        count = _popcount(mask)
        if best is None or count < best_count:
            best, best_mask, best_count = cell, mask, count
            if count == 1:
                return best, best_mask
        coverage[state.row_ids[cell]] |= mask
        coverage[state.col_ids[cell]] |= mask

    if best is None:
        return None

    for segment, full in enumerate(state.segment_masks):
        if (coverage[segment] | state.used[segment]) & full != full:
            return best, 0
    return best, best_mask
