"""Board/solution data structures and the per-cell segment index used by the solver."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

Segments = Tuple[int, ...]


def segment_bounds(sizes: Sequence[int], position: int) -> Tuple[int, int]:
    """Return (start, end) of the segment in `sizes` covering `position` (end exclusive)."""
    cursor = 0
    for size in sizes:
        if cursor <= position < cursor + size:
            return cursor, cursor + size
        cursor += size
    raise ValueError(f"Unable to find position {position} in {list(sizes)}")


@dataclass(frozen=True)
class Board:
    size: int
    rows: Tuple[Segments, ...]
    columns: Tuple[Segments, ...]
    cellcount: int = field(init=False)

    def __post_init__(self) -> None:
        # Accept any nested sequence but store immutable tuples.
        object.__setattr__(self, "rows", tuple(tuple(r) for r in self.rows))
        object.__setattr__(self, "columns", tuple(tuple(c) for c in self.columns))
        object.__setattr__(self, "cellcount", self.size * self.size)

    def cell_index(self, row: int, col: int) -> int:
        return row * self.size + col

    def to_dict(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "cellcount": self.cellcount,
            "rows": [list(r) for r in self.rows],
            "columns": [list(c) for c in self.columns],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Board":
        return cls(size=payload["size"], rows=payload["rows"], columns=payload["columns"])


@dataclass(frozen=True)
class Solution:
    solution: Tuple[int, ...]
    skeleton: Tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "solution", tuple(self.solution))
        object.__setattr__(self, "skeleton", tuple(self.skeleton))

    @property
    def clue_count(self) -> int:
        return sum(1 for v in self.skeleton if v != 0)

    def to_dict(self) -> Dict[str, Any]:
        return {"solution": list(self.solution), "skeleton": list(self.skeleton)}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Solution":
        return cls(solution=payload["solution"], skeleton=payload["skeleton"])


def value_mask(max_value: int) -> int:
    """Bitmask with bits 1..max_value set; bit v stands for digit v."""
    return (1 << (max_value + 1)) - 2


@dataclass(frozen=True)
class CellSegments:
    """Indices of the cells sharing a row-segment / column-segment with one cell (itself included)."""

    row_segment: Tuple[int, ...]
    col_segment: Tuple[int, ...]
    row_id: int
    col_id: int
    max_value: int
    max_mask: int


class BoardMap:
    """
    Per-cell segment index of a board. Row segments are numbered first, column
    segments follow, so one id space covers both axes.
    """

    def __init__(self, size: int, cells: List[CellSegments], segment_cells: List[Tuple[int, ...]]):
        self.size = size
        self.cells = cells
        self.segment_cells = segment_cells
        self.segment_masks = [value_mask(len(c)) for c in segment_cells]
        # Cached by the solver once the layout-level placement check has run.
        self.placeable: Optional[bool] = None

    @property
    def segment_count(self) -> int:
        return len(self.segment_cells)

    def __getitem__(self, cell: int) -> CellSegments:
        return self.cells[cell]

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[CellSegments]:
        return iter(self.cells)


def create_board_map(board: Board) -> BoardMap:
    segment_cells: List[Tuple[int, ...]] = []
    row_ids: Dict[Tuple[int, int], int] = {}
    col_ids: Dict[Tuple[int, int], int] = {}

    for row in range(board.size):
        start = 0
        for length in board.rows[row]:
            row_ids[(row, start)] = len(segment_cells)
            segment_cells.append(tuple(board.cell_index(row, c) for c in range(start, start + length)))
            start += length
    for col in range(board.size):
        start = 0
        for length in board.columns[col]:
            col_ids[(col, start)] = len(segment_cells)
            segment_cells.append(tuple(board.cell_index(r, col) for r in range(start, start + length)))
            start += length

    cells: List[CellSegments] = []
    for row in range(board.size):
        for col in range(board.size):
            row_start, _ = segment_bounds(board.rows[row], col)
            col_start, _ = segment_bounds(board.columns[col], row)
            row_id = row_ids[(row, row_start)]
            col_id = col_ids[(col, col_start)]
            max_value = min(len(segment_cells[row_id]), len(segment_cells[col_id]))
            cells.append(CellSegments(
                row_segment=segment_cells[row_id],
                col_segment=segment_cells[col_id],
                row_id=row_id,
                col_id=col_id,
                max_value=max_value,
                max_mask=value_mask(max_value),
            ))
    return BoardMap(board.size, cells, segment_cells)
