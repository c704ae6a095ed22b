import json

import pytest

import run
from src.segdoku.loader import load_records
from src.utils.io import save_json


def _make_save(tmp_path, record):
    path = tmp_path / "save.json"
    save_json(path, record)
    return path


def test_generate_to_csv_and_verify(tmp_path):
    output = tmp_path / "batch.csv"
    code = run.main(["generate", "--difficulty", "1", "--seed", "10", "--count", "2", "--output", str(output)])
    assert code == 0

    content = output.read_text()
    assert "id,seed,difficulty,size,clues,board,solution,steps,error" in content
    assert "d1-s10" in content and "d1-s11" in content

    assert run.main(["verify", str(output)]) == 0


def test_generate_to_jsonl(tmp_path):
    output = tmp_path / "batch.jsonl"
    assert run.main(["generate", "--level", "1", "--output", str(output)]) == 0

    records = load_records(str(output))
    assert len(records) == 1
    assert records[0]["board"]["size"] == 5
    assert run.main(["verify", str(output)]) == 0


def test_generate_to_parquet(tmp_path):
    output = tmp_path / "batch.parquet"
    assert run.main(["generate", "--seed", "4", "--count", "2", "--output", str(output)]) == 0

    records = load_records(str(output))
    assert [r["seed"] for r in records] == [4, 5]
    assert isinstance(records[0]["solution"]["skeleton"], list)


def test_generate_prints_without_output(capsys):
    assert run.main(["generate", "--seed", "1"]) == 0
    line = capsys.readouterr().out.strip().splitlines()[-1]
    row = json.loads(line)
    assert row["id"] == "d1-s1"
    assert row["error"] is None


def test_generate_writes_one_trace_per_puzzle(tmp_path):
    trace_dir = tmp_path / "traces"
    args = ["generate", "--seed", "2", "--count", "2", "--output", str(tmp_path / "b.csv"), "--trace", str(trace_dir)]
    assert run.main(args) == 0

    assert sorted(p.name for p in trace_dir.iterdir()) == ["d1-s2.csv", "d1-s3.csv"]
    header = (trace_dir / "d1-s2.csv").read_text().splitlines()[0]
    assert header.startswith("timestamp,step_number,action_type")


def test_batch_steps_are_counted_per_puzzle():
    single = run.generate_batch(3, 1, 1, 10, show_progress=False)
    batch = run.generate_batch(2, 1, 3, 10, show_progress=False)

    assert batch[1]["steps"] == single[0]["steps"]
    assert run.get_tracer().summary()["num_assignments"] == batch[-1]["steps"]


def test_generation_errors_are_recorded_not_raised(monkeypatch, tmp_path):
    monkeypatch.setenv("SEGDOKU_MAX_ATTEMPTS", "1")

    def broken(seed, difficulty, max_attempts, tracer=None):
        from src.segdoku.errors import GenerationFailed
        raise GenerationFailed(f"attempts={max_attempts}")

    monkeypatch.setattr(run, "generate", broken)
    output = tmp_path / "failed.csv"
    assert run.main(["generate", "--output", str(output)]) == 1
    assert "attempts=1" in output.read_text()


def test_verify_flags_mismatch(tmp_path):
    output = tmp_path / "batch.jsonl"
    run.main(["generate", "--seed", "6", "--output", str(output)])
    records = load_records(str(output))
    solution = records[0]["solution"]["solution"]
    records[0]["solution"]["solution"] = solution[1:] + solution[:1]
    output.write_text("\n".join(json.dumps(r) for r in records) + "\n")

    assert run.main(["verify", str(output)]) == 1


def test_check_save_accepts_valid_and_rejects_malformed(tmp_path, capsys):
    board = {"size": 5, "cellcount": 25, "rows": [[5]] * 5, "columns": [[5]] * 5}
    record = {
        "board": board,
        "solution": {"solution": [1] * 25, "skeleton": [0] * 25},
        "userData": {"values": [0] * 25, "moves": []},
        "level": 1,
        "elapsedSeconds": 0,
    }
    assert run.main(["check-save", str(_make_save(tmp_path, record))]) == 0
    assert capsys.readouterr().out.startswith("OK")

    del record["solution"]["skeleton"]
    assert run.main(["check-save", str(_make_save(tmp_path, record))]) == 1
    assert "REJECTED" in capsys.readouterr().out


def test_unknown_output_format(tmp_path):
    with pytest.raises(ValueError):
        run.write_results([], tmp_path / "out.txt")


def test_verify_skips_records_without_skeleton(tmp_path, capsys):
    output = tmp_path / "batch.jsonl"
    run.main(["generate", "--seed", "6", "--count", "2", "--output", str(output)])
    records = load_records(str(output))
    del records[0]["solution"]["skeleton"]

    report = run.verify_records(records)
    assert report == [{"id": "d1-s6", "status": "skipped"}, {"id": "d1-s7", "status": "ok"}]

    output.write_text("\n".join(json.dumps(r) for r in records) + "\n")
    assert run.main(["verify", str(output)]) == 0
    assert "'skipped': 1" in capsys.readouterr().out
