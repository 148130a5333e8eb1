"""
Run-threshold hybrid sort (a simplified TimSort) with full step emission.

Phase A insertion-sorts fixed-length runs of `run_size` elements; the last run
may be shorter. Phase B merges adjacent blocks bottom-up, doubling the block
size each pass until it covers the array.

A pair is merged only when mid < right. When the left block already reaches
the end of the array the pair is skipped for that pass, and the trailing block
is picked up by a later, wider pass.

Public API (stable):
    DEFAULT_RUN_SIZE
    run(values, run_size=DEFAULT_RUN_SIZE) -> Trace
    sort_in_place(array, recorder, run_size=DEFAULT_RUN_SIZE) -> None
"""

from __future__ import annotations

from typing import Any, List

from sorttrace.engines.common import StepRecorder, check_run_size, coerce_values
from sorttrace.engines.insertion import insertion_pass
from sorttrace.engines.merge import merge
from sorttrace.model import AlgorithmKind, StepKind, Trace

DEFAULT_RUN_SIZE: int = 32

__all__ = ["DEFAULT_RUN_SIZE", "run", "sort_in_place"]


def sort_in_place(array: List[Any], recorder: StepRecorder, run_size: int = DEFAULT_RUN_SIZE) -> None:
    """
    Run both phases over `array`. Arrays of length <= 1 emit nothing.
    """
    n = len(array)
    if n <= 1:
        return

    for lo in range(0, n, run_size):
        hi = min(lo + run_size - 1, n - 1)
        recorder.emit(
            array,
            StepKind.RUN_START,
            f"Using Insertion Sort for run from index {lo} to {hi}",
            active=lo,
            compare=hi,
        )
        insertion_pass(array, lo, hi, recorder)

    size = run_size
    while size < n:
        for left in range(0, n, 2 * size):
            mid = left + size - 1
            right = min(left + 2 * size - 1, n - 1)
            if mid < right:
                merge(array, left, mid, right, recorder)
        size *= 2


def run(values: Any, run_size: int = DEFAULT_RUN_SIZE) -> Trace:
    """Return the hybrid run sort Trace for `values` (never mutated)."""
    run_size = check_run_size(run_size)
    array = coerce_values(values)
    rec = StepRecorder(AlgorithmKind.HYBRID_RUN_SORT)

    rec.emit(
        array,
        StepKind.START,
        "Starting the TimSort algorithm (hybrid of Insertion Sort and Merge Sort).",
    )
    sort_in_place(array, rec, run_size)
    rec.emit(array, StepKind.COMPLETE, "TimSort complete! The array is now sorted.")
    return rec.finish()
