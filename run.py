"""CLI entrypoint: generate puzzle batches, verify them, and check save files."""

import argparse
import csv
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from tqdm import tqdm

from generator import generate
from src.segdoku.board import DEFAULT_MAX_ATTEMPTS
from src.segdoku.difficulty import HIGH, LOW, get_difficulty
from src.segdoku.errors import MalformedSaveData, SegdokuError
from src.segdoku.loader import NESTED_COLUMNS, load_records
from src.segdoku.model import Board
from src.segdoku.savegame import import_save_game
from src.segdoku.solver_core import solve_board
from src.utils.io import load_json
from src.utils.trace import Tracer, get_tracer, reset_tracer

RESULT_COLUMNS = ["id", "seed", "difficulty", "size", "clues", "board", "solution", "steps", "error"]


def _default_max_attempts() -> int:
    raw = os.environ.get("SEGDOKU_MAX_ATTEMPTS")
    if raw is None:
        return DEFAULT_MAX_ATTEMPTS
    try:
        return int(raw)
    except ValueError:
        raise SystemExit(f"SEGDOKU_MAX_ATTEMPTS must be an integer, got {raw!r}")


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Generate and check segment-divided Latin puzzles")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a batch of puzzles")
    level_group = gen.add_mutually_exclusive_group()
    level_group.add_argument(
        "--difficulty", type=int, choices=range(LOW, HIGH + 1), default=None,
        help=f"Difficulty {LOW}..{HIGH} (default {LOW})",
    )
    level_group.add_argument("--level", type=int, default=None, help="Player level, mapped onto a difficulty")
    gen.add_argument("--seed", type=int, default=0, help="Seed of the first puzzle; puzzle i uses seed + i")
    gen.add_argument("--count", type=int, default=1, help="Number of puzzles to generate")
    gen.add_argument(
        "--max-attempts",
        type=int,
        default=_default_max_attempts(),
        help="Layout/solve attempts per puzzle before giving up (env: SEGDOKU_MAX_ATTEMPTS)",
    )
    gen.add_argument("--output", type=Path, default=None, help="Write results to .csv, .jsonl or .parquet")
    gen.add_argument(
        "--trace", type=Path, default=None, help="Optional directory for one step trace CSV per puzzle"
    )

    ver = sub.add_parser("verify", help="Re-solve every skeleton in a generated batch")
    ver.add_argument("input", type=Path, help="Batch written by 'generate'")

    chk = sub.add_parser("check-save", help="Validate a save game JSON file")
    chk.add_argument("input", type=Path, help="Path to save game JSON")

    return parser.parse_args(argv)


def generate_batch(
    seed: int,
    difficulty: int,
    count: int,
    max_attempts: int,
    trace_dir: Optional[Path] = None,
    show_progress: bool = True,
) -> List[Dict[str, Any]]:
    results = []
    iterator = range(seed, seed + count)
    if show_progress:
        iterator = tqdm(iterator, desc="Generating", unit="puzzle")

    for puzzle_seed in iterator:
        reset_tracer()
        tracer = get_tracer()
        row: Dict[str, Any] = {
            "id": f"d{difficulty}-s{puzzle_seed}",
            "seed": puzzle_seed,
            "difficulty": difficulty,
            "size": None,
            "clues": None,
            "board": None,
            "solution": None,
            "steps": -1,
            "error": None,
        }
        try:
            board, solution = generate(puzzle_seed, difficulty, max_attempts=max_attempts, tracer=tracer)
            row.update(
                size=board.size,
                clues=solution.clue_count,
                board=board.to_dict(),
                solution=solution.to_dict(),
                # Use solver branching as a proxy for search effort.
                steps=tracer.summary()["num_assignments"],
            )
        except SegdokuError as e:
            print(f"ERROR: Failed to generate puzzle with seed {puzzle_seed}: {e}")
            row["error"] = str(e)
        if trace_dir:
            tracer.to_csv(Path(trace_dir) / f"{row['id']}.csv")
        results.append(row)
    return results


def _flatten_nested(results: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    flat = []
    for r in results:
        row = dict(r)
        for key in NESTED_COLUMNS:
            if row.get(key) is not None:
                row[key] = json.dumps(row[key], separators=(",", ":"))
        flat.append(row)
    return flat


def write_results(results: List[Dict[str, Any]], output_path: Path) -> None:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if output_path.suffix == ".csv":
        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=RESULT_COLUMNS)
            writer.writeheader()
            for row in _flatten_nested(results):
                writer.writerow(row)
        return

    if output_path.suffix == ".parquet":
        pd.DataFrame(_flatten_nested(results), columns=RESULT_COLUMNS).to_parquet(output_path, index=False)
        return

    if output_path.suffix in (".jsonl", ".json"):
        pd.DataFrame(results, columns=RESULT_COLUMNS).to_json(output_path, orient="records", lines=True)
        return

    raise ValueError(f"Unsupported output format: {output_path.suffix}")


def verify_records(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Re-solve each stored skeleton and compare against the stored solution."""
    report = []
    tracer = Tracer(enabled=False)
    for record in records:
        board_payload = record.get("board")
        solution_payload = record.get("solution")
        if not board_payload or not isinstance(solution_payload, dict):
            report.append({"id": record.get("id"), "status": "skipped"})
            continue
        skeleton = solution_payload.get("skeleton")
        expected = solution_payload.get("solution")
        if skeleton is None or expected is None:
            report.append({"id": record.get("id"), "status": "skipped"})
            continue

        board = Board.from_dict(board_payload)
        resolved = solve_board(board, skeleton, tracer)
        ok = resolved is not None and resolved == list(expected)
        report.append({"id": record.get("id"), "status": "ok" if ok else "mismatch"})
    return report


def _run_generate(args) -> int:
    if args.level is not None:
        difficulty = get_difficulty(args.level)
    else:
        difficulty = args.difficulty if args.difficulty is not None else LOW

    results = generate_batch(args.seed, difficulty, args.count, args.max_attempts, trace_dir=args.trace)

    if args.output:
        write_results(results, args.output)
        print(f"Wrote {len(results)} puzzles to {args.output}")
    else:
        for row in results:
            print(json.dumps(row, separators=(",", ":")))

    return 1 if any(r["error"] for r in results) else 0


def _run_verify(args) -> int:
    report = verify_records(load_records(args.input))
    counts: Dict[str, int] = {}
    for entry in report:
        counts[entry["status"]] = counts.get(entry["status"], 0) + 1
        if entry["status"] == "mismatch":
            print(f"MISMATCH: {entry['id']}")
    print(f"Verified {len(report)} records: {counts}")
    return 1 if counts.get("mismatch") else 0


def _run_check_save(args) -> int:
    try:
        game = import_save_game(load_json(args.input))
    except (MalformedSaveData, json.JSONDecodeError) as e:
        print(f"REJECTED: {args.input}: {e}")
        return 1
    print(
        f"OK: level {game.level}, {game.board.size}x{game.board.size} board, "
        f"{len(game.user_data.moves)} moves, {game.elapsed_seconds}s elapsed"
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.command == "generate":
        return _run_generate(args)
    if args.command == "verify":
        return _run_verify(args)
    return _run_check_save(args)


if __name__ == "__main__":
    raise SystemExit(main())
