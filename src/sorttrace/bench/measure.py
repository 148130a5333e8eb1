"""
Timing harness for trace engines.

We time exactly one `sorttrace.engines.run(...)` call per sample with a
monotonic high-resolution clock. Warmup and GC collection happen outside the
timed block.

Public API (stable):
    time_trace_call(...) -> dict

Returned dict schema:
    {
        "algo": str,
        "repeats": int,
        "samples_ns": list[int],            # elapsed ns for each successful sample
        "status": "ok" | "timeout" | "error",
        "error": str | None,                # populated if status == "error"
        "timed_out_on_repeat": int | None,  # 0-based repeat index if timeout occurred
        "step_counts": dict[str, int],      # per-kind counts of the last trace produced
        "trace": Trace | None,              # last trace produced (for checks/export)
    }
"""

from __future__ import annotations

import gc
import time
from typing import Any, Dict, List, Optional

from sorttrace.engines import run
from sorttrace.model import AlgorithmKind

__all__ = ["time_trace_call"]


def time_trace_call(
    *,
    algo_name: str,
    kind: AlgorithmKind,
    values: List[int],
    config: Optional[Dict[str, Any]],
    repeats: int,
    warmup: bool,
    disable_gc: bool,
    timeout_seconds: float,
) -> Dict[str, Any]:
    """
    Time repeated calls to `run(kind, values, **config)`.

    Parameters
    ----------
    algo_name : str
        Label for records (an algorithm may appear twice with different configs).
    kind : AlgorithmKind
        Engine to run.
    values : list[int]
        Input sequence; engines copy it, so the same list is reused across samples.
    config : dict | None
        Keyword arguments for `run` (currently only `run_size`).
    repeats : int
        Number of timed samples to collect.
    warmup : bool
        If True, make one untimed call first.
    disable_gc : bool
        If True, collect and disable Python GC during the timed loop; restore afterward.
    timeout_seconds : float
        Per-sample threshold; exceeding it marks status="timeout" and stops sampling.
    """
    if repeats < 0:
        raise ValueError("repeats must be nonnegative")
    if timeout_seconds <= 0:
        raise ValueError("timeout_seconds must be positive")

    kwargs = dict(config or {})
    result: Dict[str, Any] = {
        "algo": algo_name,
        "repeats": repeats,
        "samples_ns": [],
        "status": "ok",
        "error": None,
        "timed_out_on_repeat": None,
        "step_counts": {},
        "trace": None,
    }

    if warmup and repeats > 0:
        try:
            run(kind, values, **kwargs)
        except Exception as e:
            result["status"] = "error"
            result["error"] = f"warmup failed: {e!r}"
            return result

    prev_gc_enabled = gc.isenabled()
    try:
        if disable_gc:
            gc.collect()
            gc.disable()

        threshold_ns = int(timeout_seconds * 1e9)
        for r in range(repeats):
            try:
                t0 = time.perf_counter_ns()
                trace = run(kind, values, **kwargs)
                t1 = time.perf_counter_ns()
            except Exception as e:
                result["status"] = "error"
                result["error"] = f"run failed at repeat {r}: {e!r}"
                break

            elapsed = t1 - t0
            result["samples_ns"].append(int(elapsed))
            result["trace"] = trace
            result["step_counts"] = trace.counts()

            if elapsed > threshold_ns:
                result["status"] = "timeout"
                result["timed_out_on_repeat"] = r
                break
    finally:
        # Leave GC disabled if the caller had it disabled already
        if disable_gc and prev_gc_enabled:
            gc.enable()

    return result
