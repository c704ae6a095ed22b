import json
import os
from typing import Any, Dict, List

import pandas as pd

# Columns written as JSON strings in CSV output.
NESTED_COLUMNS = ("board", "solution")


def _coerce_jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _coerce_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_coerce_jsonable(v) for v in value]
    if hasattr(value, "tolist"):
        # numpy arrays and scalars coming out of pandas
        return _coerce_jsonable(value.tolist())
    return value


def _normalize_record(record: Dict[str, Any]) -> Dict[str, Any]:
    record = _coerce_jsonable(record)
    for key in NESTED_COLUMNS:
        raw = record.get(key)
        if isinstance(raw, str) and raw.strip():
            try:
                record[key] = json.loads(raw)
            except json.JSONDecodeError:
                raise ValueError(f"Column '{key}' does not hold valid JSON: {raw[:40]!r}")
    return record


def load_records(file_path: str) -> List[Dict[str, Any]]:
    """
    Reads generated puzzles (or save games) from a file. Handles .json, .jsonl,
    .csv and .parquet formats. Returns a list of plain dictionaries.
    """
    file_path = str(file_path)
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    # Case 1: Parquet / CSV (tabular)
    if file_path.endswith(".parquet"):
        df = pd.read_parquet(file_path)
        return [_normalize_record(r) for r in df.to_dict(orient="records")]

    if file_path.endswith(".csv"):
        df = pd.read_csv(file_path, keep_default_na=False)
        return [_normalize_record(r) for r in df.to_dict(orient="records")]

    # Case 2: JSON file (array or object)
    if file_path.endswith(".json"):
        with open(file_path, "r", encoding="utf-8") as f:
            text = f.read()
        try:
            payload = json.loads(text)
        except json.JSONDecodeError:
            # Some batches use ".json" but actually store JSONL.
            return _parse_lines(text.splitlines())
        if isinstance(payload, list):
            return [_normalize_record(p) for p in payload if isinstance(p, dict)]
        if isinstance(payload, dict):
            return [_normalize_record(payload)]
        return []

    # Case 3: JSONL file
    with open(file_path, "r", encoding="utf-8") as f:
        return _parse_lines(f)


def _parse_lines(lines) -> List[Dict[str, Any]]:
    data = []
    for line in lines:
        if not line.strip():
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(obj, dict):
            data.append(_normalize_record(obj))
    return data
