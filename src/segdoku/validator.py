"""Layout feasibility check used as the layout generator's pruning oracle."""

from typing import List, Sequence, Tuple

from .model import segment_bounds

Layout = Sequence[Sequence[int]]


def build_segment_maps(rows: Layout, columns: Layout) -> Tuple[List[List[int]], List[List[int]]]:
    """
    row_map[r][c] is the length of column c's segment covering row r.
    col_map[c][r] is the length of row r's segment covering column c.
    """
    size = len(rows)
    row_map = [[0] * size for _ in range(size)]
    col_map = [[0] * size for _ in range(size)]

    for r in range(size):
        for c in range(size):
            start, end = segment_bounds(columns[c], r)
            row_map[r][c] = end - start

    for c in range(size):
        for r in range(size):
            start, end = segment_bounds(rows[r], c)
            col_map[c][r] = end - start

    return row_map, col_map


def _lines_feasible(lines: Layout, cross_map: List[List[int]]) -> bool:
    for index, segments in enumerate(lines):
        cursor = 0
        for segment_size in segments:
            cross_sizes = sorted(cross_map[index][cursor:cursor + segment_size], reverse=True)
            # The i-th largest crossing segment must be able to host value segment_size - i.
            for i in range(segment_size):
                if cross_sizes[i] < segment_size - i:
                    return False
            cursor += segment_size
    return True


def is_valid_layout(rows: Layout, columns: Layout) -> bool:
    """Check that every segment on both axes can hold the values 1..len(segment)."""
    row_map, col_map = build_segment_maps(rows, columns)
    return _lines_feasible(rows, row_map) and _lines_feasible(columns, col_map)
