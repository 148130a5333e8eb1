"""
Trace report runner: sweeps the engines over generated inputs from a YAML config.

Usage (from repo root):
    python -m sorttrace.bench.runner experiments/configs/01_level_sizes.yaml
    sorttrace-report experiments/configs/01_level_sizes.yaml

Outputs in a new run directory:
    - config_resolved.yaml    # the config we actually used
    - meta.json               # environment info (python, numpy, cpu/ram, git commit)
    - results.jsonl           # one JSON line per timed sample, with step counts
    - summary.csv             # per (algo, n): median + IQR time, step/compare/place/merge counts
    - traces.jsonl            # only if export_traces: every step of every trace
    - (console) rich/tqdm summaries

Design notes:
- For each size n, we generate ONE input and give it to every algorithm.
- With check_traces on, each produced trace is checked against the trace
  invariants; a violation is recorded as an error for that algorithm.
- On timeout/error for an algorithm at size n, we skip larger sizes for that algo.
"""

from __future__ import annotations

import argparse
import datetime as _dt
import json
import platform
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
import psutil
import yaml
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

import sorttrace
from sorttrace.bench.measure import time_trace_call
from sorttrace.datasets import make_dataset
from sorttrace.model import AlgorithmKind, StepKind
from sorttrace.validate.properties import trace_violations

_console = Console()

REQUIRED_KEYS = [
    "experiment_name",
    "output_dir",
    "seed",
    "repeats",
    "warmup",
    "disable_gc",
    "timeout_seconds",
    "dataset",
    "sizes",
    "algorithms",
]
ALLOWED_ALGO_CONFIG = {"run_size"}
SUMMARY_COLUMNS = [
    "algo", "n", "samples_ok", "median_ns", "iqr_ns", "min_ns", "max_ns",
    "steps", "comparisons", "placements", "merges",
]


# ------------------------- data structures ------------------------- #

@dataclass(frozen=True)
class AlgoSpec:
    name: str
    kind: AlgorithmKind
    config: Dict[str, Any]


# ------------------------- helpers: IO & meta ------------------------- #

def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    if not isinstance(cfg, dict):
        raise ValueError(f"Config {path} must be a YAML mapping")
    return cfg


def _write_yaml(obj: Dict[str, Any], path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False)


def _append_jsonl(obj: Dict[str, Any], path: Path) -> None:
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(obj, separators=(",", ":"), ensure_ascii=False))
        f.write("\n")


def _timestamp() -> str:
    return _dt.datetime.now().strftime("%Y%m%d_%H%M%S")


def _ensure_run_dir(base_dir: Path, experiment_name: str) -> Path:
    base_dir.mkdir(parents=True, exist_ok=True)
    run_dir = base_dir / f"{_timestamp()}_{experiment_name}"
    run_dir.mkdir(parents=False, exist_ok=False)
    return run_dir


def _git_commit_short() -> Optional[str]:
    try:
        out = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"], stderr=subprocess.DEVNULL)
    except (OSError, subprocess.CalledProcessError):
        return None
    return out.decode("utf-8").strip()


def _gather_meta() -> Dict[str, Any]:
    """Versions and machine facts recorded next to each report."""
    versions = {lib.__name__: lib.__version__ for lib in (np, pd, psutil, yaml)}
    versions["python"] = platform.python_version()
    versions["sorttrace"] = sorttrace.__version__
    return {
        "versions": versions,
        "git_commit": _git_commit_short(),
        "machine": {
            "platform": platform.platform(),
            "cores_logical": psutil.cpu_count(logical=True),
            "ram_gb": round(psutil.virtual_memory().total / 2**30, 2),
        },
        "start_time": _dt.datetime.now().isoformat(timespec="seconds"),
    }


def _resolve_algorithms(cfg_algos: List[Dict[str, Any]]) -> List[AlgoSpec]:
    """
    Turn the config's algorithm entries into AlgoSpecs.

    Each entry is {"name": <AlgorithmKind value>, "label": <optional>, "config": {...}}.
    The label defaults to the name and must be unique, so one engine can be
    listed twice (e.g. hybrid with two run sizes).
    """
    specs: List[AlgoSpec] = []
    seen = set()
    for entry in cfg_algos:
        name = entry.get("name")
        if not name or not isinstance(name, str):
            raise ValueError("Each algorithm must have a string 'name' field")
        kind = AlgorithmKind.parse(name)

        label = str(entry.get("label") or name)
        if label in seen:
            raise ValueError(f"Duplicate algorithm label in config: {label}")
        seen.add(label)

        config = entry.get("config") or {}
        if not isinstance(config, dict):
            raise ValueError(f"Algorithm '{label}': 'config' must be a dict if provided")
        unknown = set(config) - ALLOWED_ALGO_CONFIG
        if unknown:
            raise ValueError(f"Algorithm '{label}': unsupported config keys {sorted(unknown)}")

        specs.append(AlgoSpec(name=label, kind=kind, config=config))
    return specs


def _iqr_ns(series: pd.Series) -> int:
    return int(series.quantile(0.75) - series.quantile(0.25))


def _aggregate_summary(jsonl_path: Path) -> pd.DataFrame:
    if not jsonl_path.exists():
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    df = pd.read_json(jsonl_path, lines=True)
    if "time_ns" not in df.columns:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    df = df[df["time_ns"].notna()]
    if df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    out = (
        df.groupby(["algo", "n"], as_index=False)
        .agg(
            samples_ok=("time_ns", "count"),
            median_ns=("time_ns", "median"),
            iqr_ns=("time_ns", _iqr_ns),
            min_ns=("time_ns", "min"),
            max_ns=("time_ns", "max"),
            # traces are deterministic, so every sample has the same counts
            steps=("steps", "first"),
            comparisons=("comparisons", "first"),
            placements=("placements", "first"),
            merges=("merges", "first"),
        )
    )
    int_cols = [c for c in SUMMARY_COLUMNS if c not in ("algo",)]
    out[int_cols] = out[int_cols].astype("int64")
    return out[SUMMARY_COLUMNS].sort_values(["algo", "n"], ignore_index=True)


def _print_rich_summary(summary: pd.DataFrame, sizes: List[int]) -> None:
    table = Table(title="Trace Summary (steps / comparisons, median ms)")
    table.add_column("Algorithm", style="bold")
    picks: List[Tuple[str, int]] = []
    if sizes:
        first, mid, last = sizes[0], sizes[len(sizes) // 2], sizes[-1]
        picks = [(f"n={first}", first), (f"n={mid}", mid), (f"n={last}", last)]
        # dedupe while keeping order for short size lists
        picks = list(dict.fromkeys(picks))
    for hdr, _ in picks:
        table.add_column(hdr, justify="right")

    for algo in summary["algo"].unique():
        row = [f"[bold]{algo}[/]"]
        for _, npick in picks:
            s = summary[(summary["algo"] == algo) & (summary["n"] == npick)]
            if s.empty:
                row.append("—")
                continue
            r = s.iloc[0]
            row.append(f"{int(r['steps'])} / {int(r['comparisons'])}  ({r['median_ns'] / 1e6:.2f})")
        table.add_row(*row)

    _console.print()
    _console.print(table)
    _console.print()


def _status_record(a_spec: AlgoSpec, n: int, status: str, **extra: Any) -> Dict[str, Any]:
    rec = {"algo": a_spec.name, "n": int(n), "status": status, "config": a_spec.config}
    rec.update(extra)
    return rec


# ------------------------- core runner ------------------------- #

def run_experiment(config_path: Path) -> Path:
    cfg = _load_yaml(config_path)

    missing = [k for k in REQUIRED_KEYS if k not in cfg]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")

    experiment_name = str(cfg["experiment_name"])
    output_dir = Path(cfg["output_dir"])
    sizes: List[int] = [int(n) for n in cfg["sizes"]]
    repeats = int(cfg["repeats"])
    warmup = bool(cfg["warmup"])
    disable_gc = bool(cfg["disable_gc"])
    timeout_seconds = float(cfg["timeout_seconds"])
    dataset_spec: Dict[str, Any] = dict(cfg["dataset"])
    check_traces = bool(cfg.get("check_traces", True))
    export_traces = bool(cfg.get("export_traces", False))

    if not sizes:
        raise ValueError("Config 'sizes' must be a non-empty list of nonnegative integers")

    algos = _resolve_algorithms(list(cfg["algorithms"]))

    run_dir = _ensure_run_dir(output_dir, experiment_name)
    results_path = run_dir / "results.jsonl"
    summary_path = run_dir / "summary.csv"
    meta_path = run_dir / "meta.json"
    traces_path = run_dir / "traces.jsonl"
    cfg_resolved_path = run_dir / "config_resolved.yaml"

    _write_yaml(cfg, cfg_resolved_path)
    with meta_path.open("w", encoding="utf-8") as f:
        json.dump(_gather_meta(), f, indent=2)

    rng = np.random.default_rng(int(cfg["seed"]))
    per_algo_skip = {a.name: False for a in algos}

    _console.print(f"[bold green]Run directory:[/bold green] {run_dir}")
    _console.print(f"[bold]Experiment:[/bold] {experiment_name}")
    _console.print(f"[bold]Algorithms:[/bold] {', '.join(a.name for a in algos)}")
    _console.print()

    for n in tqdm(sizes, desc="Sizes", unit="n"):
        values = make_dataset(n, dataset_spec, rng)

        for a_spec in algos:
            if per_algo_skip[a_spec.name]:
                continue

            res = time_trace_call(
                algo_name=a_spec.name,
                kind=a_spec.kind,
                values=values,
                config=a_spec.config,
                repeats=repeats,
                warmup=warmup,
                disable_gc=disable_gc,
                timeout_seconds=timeout_seconds,
            )
            trace = res["trace"]

            if check_traces and trace is not None:
                problems = trace_violations(trace, values)
                if problems:
                    res["status"] = "error"
                    res["error"] = "trace check failed: " + "; ".join(problems)

            counts = res["step_counts"]
            # samples of a failed run or a trace that failed its checks never reach the summary
            timed_ok = res["status"] in ("ok", "timeout")
            for trial_idx, t_ns in enumerate(res["samples_ns"] if timed_ok else []):
                _append_jsonl(
                    {
                        "algo": a_spec.name,
                        "kind": a_spec.kind.value,
                        "n": int(n),
                        "dataset": dataset_spec,
                        "trial": int(trial_idx),
                        "time_ns": int(t_ns),
                        "steps": len(trace),
                        "comparisons": counts.get(StepKind.COMPARE.value, 0),
                        "placements": counts.get(StepKind.PLACE.value, 0),
                        "merges": counts.get(StepKind.MERGE.value, 0),
                        "config": a_spec.config,
                    },
                    results_path,
                )

            if export_traces and trace is not None:
                _append_jsonl(
                    {
                        "algo": a_spec.name,
                        "n": int(n),
                        "input": values,
                        "steps": trace.to_records(),
                    },
                    traces_path,
                )

            status = res.get("status", "ok")
            if status == "timeout":
                per_algo_skip[a_spec.name] = True
                _append_jsonl(
                    _status_record(a_spec, n, "timeout", timed_out_on_repeat=res.get("timed_out_on_repeat")),
                    results_path,
                )
            elif status == "error":
                per_algo_skip[a_spec.name] = True
                _console.print(f"[bold red]{a_spec.name} failed at n={n}:[/bold red] {res.get('error')}")
                _append_jsonl(_status_record(a_spec, n, "error", error=res.get("error")), results_path)

    summary_df = _aggregate_summary(results_path)
    summary_df.to_csv(summary_path, index=False)
    _print_rich_summary(summary_df, sizes)

    _console.print("[bold green]Done.[/bold green] Wrote:")
    for p in (results_path, summary_path, meta_path, cfg_resolved_path):
        _console.print(f" - {p}")
    if export_traces:
        _console.print(f" - {traces_path}")

    return run_dir


# ------------------------- CLI ------------------------- #

def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate sort traces and a step-count report from a YAML config.")
    p.add_argument("config", type=str, help="Path to YAML experiment config")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    config_path = Path(args.config).resolve()
    if not config_path.exists():
        raise SystemExit(f"Config file not found: {config_path}")
    try:
        run_experiment(config_path)
    except Exception as e:
        _console.print(f"[bold red]Runner failed:[/bold red] {e!r}")
        raise


if __name__ == "__main__":
    main()
