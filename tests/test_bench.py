"""
Timing harness and YAML report runner.
"""

from __future__ import annotations

import gc
import json
import pathlib
import sys

import pandas as pd
import pytest
import yaml

# Ensure `src/` is importable when running `pytest` from the repo root
_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from sorttrace.bench.measure import time_trace_call
from sorttrace.bench import runner
from sorttrace.bench.runner import main, run_experiment
from sorttrace.model import AlgorithmKind


# ------------------------- measure ------------------------- #

def test_time_trace_call_ok() -> None:
    res = time_trace_call(
        algo_name="merge_sort",
        kind=AlgorithmKind.MERGE_SORT,
        values=[3, 1, 2],
        config=None,
        repeats=3,
        warmup=True,
        disable_gc=False,
        timeout_seconds=10.0,
    )
    assert res["status"] == "ok"
    assert len(res["samples_ns"]) == 3
    assert res["step_counts"]["divide"] == 2
    assert res["trace"].final_array == [1, 2, 3]


def test_time_trace_call_records_engine_errors() -> None:
    res = time_trace_call(
        algo_name="hybrid_bad",
        kind=AlgorithmKind.HYBRID_RUN_SORT,
        values=[3, 1, 2],
        config={"run_size": 0},
        repeats=2,
        warmup=False,
        disable_gc=False,
        timeout_seconds=10.0,
    )
    assert res["status"] == "error"
    assert "run_size" in res["error"]
    assert res["samples_ns"] == []
    assert res["trace"] is None


def test_time_trace_call_restores_gc() -> None:
    assert gc.isenabled()
    time_trace_call(
        algo_name="insertion_sort",
        kind=AlgorithmKind.INSERTION_SORT,
        values=[2, 1],
        config={},
        repeats=1,
        warmup=False,
        disable_gc=True,
        timeout_seconds=10.0,
    )
    assert gc.isenabled()


@pytest.mark.parametrize("repeats, timeout", [(-1, 1.0), (1, 0.0)])
def test_time_trace_call_bad_args(repeats: int, timeout: float) -> None:
    with pytest.raises(ValueError):
        time_trace_call(
            algo_name="x",
            kind=AlgorithmKind.INSERTION_SORT,
            values=[],
            config=None,
            repeats=repeats,
            warmup=False,
            disable_gc=False,
            timeout_seconds=timeout,
        )


# ------------------------- runner ------------------------- #

def _write_config(tmp_path: pathlib.Path, **overrides) -> pathlib.Path:
    cfg = {
        "experiment_name": "smoke",
        "output_dir": str(tmp_path / "runs"),
        "seed": 1,
        "repeats": 2,
        "warmup": False,
        "disable_gc": False,
        "timeout_seconds": 10.0,
        "export_traces": True,
        "dataset": {"dist": "random", "params": {"range": [1, 20]}},
        "sizes": [0, 5, 9],
        "algorithms": [
            {"name": "insertion_sort"},
            {"name": "merge_sort"},
            {"name": "hybrid_run_sort", "label": "hybrid_r2", "config": {"run_size": 2}},
        ],
    }
    cfg.update(overrides)
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
    return path


def test_run_experiment_writes_outputs(tmp_path: pathlib.Path) -> None:
    run_dir = run_experiment(_write_config(tmp_path))

    for name in ("config_resolved.yaml", "meta.json", "results.jsonl", "summary.csv", "traces.jsonl"):
        assert (run_dir / name).exists(), name

    summary = pd.read_csv(run_dir / "summary.csv")
    assert set(summary["algo"]) == {"insertion_sort", "merge_sort", "hybrid_r2"}
    assert sorted(summary["n"].unique().tolist()) == [0, 5, 9]
    assert (summary["samples_ok"] == 2).all()

    empty = summary[summary["n"] == 0]
    assert (empty["steps"] == 2).all()
    assert (empty["comparisons"] == 0).all()

    merge_9 = summary[(summary["algo"] == "merge_sort") & (summary["n"] == 9)].iloc[0]
    assert merge_9["merges"] == 8

    lines = (run_dir / "traces.jsonl").read_text(encoding="utf-8").splitlines()
    first = json.loads(lines[0])
    assert first["steps"][0]["kind"] == "start"
    assert first["steps"][-1]["array"] == sorted(first["input"])

    meta = json.loads((run_dir / "meta.json").read_text(encoding="utf-8"))
    assert "machine" in meta and meta["machine"]["cores_logical"] >= 1
    assert set(meta["versions"]) >= {"python", "numpy", "pandas", "sorttrace"}


def test_run_experiment_records_errors_and_skips(tmp_path: pathlib.Path) -> None:
    cfg = _write_config(
        tmp_path,
        export_traces=False,
        algorithms=[
            {"name": "merge_sort"},
            {"name": "hybrid_run_sort", "config": {"run_size": -4}},
        ],
    )
    run_dir = run_experiment(cfg)
    records = [json.loads(line) for line in (run_dir / "results.jsonl").read_text().splitlines()]
    errors = [r for r in records if r.get("status") == "error"]
    # skipped after the first failing size
    assert len(errors) == 1
    assert errors[0]["algo"] == "hybrid_run_sort"
    assert not (run_dir / "traces.jsonl").exists()


def test_failed_trace_check_keeps_samples_out_of_summary(tmp_path: pathlib.Path, monkeypatch) -> None:
    monkeypatch.setattr(runner, "trace_violations", lambda trace, values: ["forced failure"])
    cfg = _write_config(
        tmp_path,
        repeats=3,
        sizes=[5],
        export_traces=False,
        algorithms=[{"name": "merge_sort"}],
    )
    run_dir = run_experiment(cfg)

    records = [json.loads(line) for line in (run_dir / "results.jsonl").read_text().splitlines()]
    assert [r.get("status") for r in records] == ["error"]
    assert "forced failure" in records[0]["error"]
    assert not any("time_ns" in r for r in records)

    summary = pd.read_csv(run_dir / "summary.csv")
    assert "merge_sort" not in set(summary["algo"])


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"algorithms": [{"name": "bubble_sort"}]}, "Unknown algorithm kind"),
        ({"algorithms": [{"name": "merge_sort"}, {"name": "merge_sort"}]}, "Duplicate"),
        ({"algorithms": [{"name": "merge_sort", "config": {"depth": 2}}]}, "unsupported config"),
        ({"sizes": []}, "sizes"),
    ],
)
def test_run_experiment_config_errors(tmp_path: pathlib.Path, overrides, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        run_experiment(_write_config(tmp_path, **overrides))


def test_missing_keys(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "c.yaml"
    path.write_text(yaml.safe_dump({"experiment_name": "x"}), encoding="utf-8")
    with pytest.raises(ValueError, match="Missing required config keys"):
        run_experiment(path)


def test_main_missing_config(tmp_path: pathlib.Path) -> None:
    with pytest.raises(SystemExit):
        main([str(tmp_path / "nope.yaml")])
