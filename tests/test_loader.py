import json

import pytest

from src.segdoku.loader import load_records


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_records(str(tmp_path / "nope.jsonl"))


def test_json_array_and_object(tmp_path):
    array_path = tmp_path / "many.json"
    array_path.write_text(json.dumps([{"id": "a"}, {"id": "b"}, "skip"]))
    assert [r["id"] for r in load_records(str(array_path))] == ["a", "b"]

    object_path = tmp_path / "one.json"
    object_path.write_text(json.dumps({"id": "c"}))
    assert load_records(str(object_path)) == [{"id": "c"}]


def test_json_extension_holding_lines(tmp_path):
    path = tmp_path / "lines.json"
    path.write_text('{"id": "a"}\n\n{"id": "b"}\n{broken\n')
    assert [r["id"] for r in load_records(str(path))] == ["a", "b"]


def test_csv_nested_columns_are_decoded(tmp_path):
    path = tmp_path / "batch.csv"
    board = {"size": 5, "cellcount": 25, "rows": [[5]] * 5, "columns": [[5]] * 5}
    path.write_text(
        "id,board,error\n"
        f"x,\"{json.dumps(board).replace(chr(34), chr(34) * 2)}\",\n"
    )
    records = load_records(str(path))
    assert records[0]["board"] == board
    assert records[0]["error"] == ""


def test_csv_with_invalid_nested_json(tmp_path):
    path = tmp_path / "batch.csv"
    path.write_text("id,board\nx,{not json\n")
    with pytest.raises(ValueError):
        load_records(str(path))
