"""Save-game records: structural validation, import and export."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .errors import MalformedSaveData
from .model import Board, Solution
from .rng import MAX_SAFE_INTEGER


@dataclass(frozen=True)
class MoveMemory:
    cell_index: int
    old_value: int


@dataclass
class UserData:
    values: List[int]
    moves: List[MoveMemory] = field(default_factory=list)


@dataclass
class SaveGame:
    board: Board
    solution: Solution
    user_data: UserData
    level: int
    elapsed_seconds: int = 0


def new_save_game(board: Board, solution: Solution, level: int) -> SaveGame:
    """A fresh game: only the skeleton is filled in, no moves, clock at zero."""
    return SaveGame(
        board=board,
        solution=solution,
        user_data=UserData(values=list(solution.skeleton)),
        level=level,
    )


def _is_non_negative_int(value: Any) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value <= MAX_SAFE_INTEGER
    )


def _is_int_list(value: Any, length: int = -1) -> bool:
    if not isinstance(value, list) or not all(_is_non_negative_int(v) for v in value):
        return False
    return length < 0 or len(value) == length


def _is_layout(lines: Any, size: int) -> bool:
    if not isinstance(lines, list) or len(lines) != size:
        return False
    for segments in lines:
        if not _is_int_list(segments) or not segments:
            return False
        if 0 in segments or sum(segments) != size:
            return False
    return True


def _is_board(board: Any) -> bool:
    if not isinstance(board, dict):
        return False
    size = board.get("size")
    if not _is_non_negative_int(size) or not _is_non_negative_int(board.get("cellcount")):
        return False
    if board["cellcount"] != size * size:
        return False
    return _is_layout(board.get("rows"), size) and _is_layout(board.get("columns"), size)


def _is_solution(solution: Any, cellcount: int) -> bool:
    if not isinstance(solution, dict):
        return False
    return _is_int_list(solution.get("solution"), cellcount) and _is_int_list(
        solution.get("skeleton"), cellcount
    )


def _is_move(move: Any, cellcount: int) -> bool:
    if not isinstance(move, dict):
        return False
    cell_index = move.get("cellIndex")
    return (
        _is_non_negative_int(cell_index)
        and cell_index < cellcount
        and _is_non_negative_int(move.get("oldValue"))
    )


def _is_user_data(user_data: Any, cellcount: int) -> bool:
    if not isinstance(user_data, dict):
        return False
    if not _is_int_list(user_data.get("values"), cellcount):
        return False
    moves = user_data.get("moves")
    return isinstance(moves, list) and all(_is_move(m, cellcount) for m in moves)


def is_save_game_valid(record: Any) -> bool:
    """Structural check of a persisted save record. Never raises."""
    if not isinstance(record, dict):
        return False
    if not _is_non_negative_int(record.get("level")):
        return False
    if not _is_non_negative_int(record.get("elapsedSeconds")):
        return False
    if not _is_board(record.get("board")):
        return False

    cellcount = record["board"]["cellcount"]
    return _is_solution(record.get("solution"), cellcount) and _is_user_data(
        record.get("userData"), cellcount
    )


def import_save_game(record: Any) -> SaveGame:
    if not is_save_game_valid(record):
        raise MalformedSaveData("Save game record failed validation")

    user_data = record["userData"]
    return SaveGame(
        board=Board.from_dict(record["board"]),
        solution=Solution.from_dict(record["solution"]),
        user_data=UserData(
            values=list(user_data["values"]),
            moves=[MoveMemory(m["cellIndex"], m["oldValue"]) for m in user_data["moves"]],
        ),
        level=record["level"],
        elapsed_seconds=record["elapsedSeconds"],
    )


def export_save_game(game: SaveGame) -> Dict[str, Any]:
    return {
        "board": game.board.to_dict(),
        "solution": game.solution.to_dict(),
        "userData": {
            "values": list(game.user_data.values),
            "moves": [
                {"cellIndex": m.cell_index, "oldValue": m.old_value}
                for m in game.user_data.moves
            ],
        },
        "level": game.level,
        "elapsedSeconds": game.elapsed_seconds,
    }
