"""
Insertion sort with full step emission.

Public API (stable):
    run(values) -> Trace
    insertion_pass(array, lo, hi, recorder) -> None
    sort_in_place(array, recorder) -> None

The walk compares with a strict `>`, so equal keys never pass one another and
the sort is stable.
"""

from __future__ import annotations

from typing import Any, List

from sorttrace.engines.common import StepRecorder, coerce_values
from sorttrace.model import AlgorithmKind, StepKind, Trace

__all__ = ["run", "insertion_pass", "sort_in_place"]


def insertion_pass(array: List[Any], lo: int, hi: int, recorder: StepRecorder) -> None:
    """
    Insertion-sort `array[lo..hi]` (inclusive) in place, recording each decision.

    Indices in emitted Steps are absolute positions in `array`; the walk never
    crosses below `lo`. COMPARE and MOVE steps keep `active_index` on `i`, the
    position the key was selected from.
    """
    for i in range(lo + 1, hi + 1):
        key = array[i]
        recorder.emit(array, StepKind.SELECT, f"Select element at index {i} with value {key}", active=i)

        j = i - 1
        while j >= lo and array[j] > key:
            recorder.emit(
                array,
                StepKind.COMPARE,
                f"Compare {key} with {array[j]} at index {j}",
                active=i,
                compare=j,
            )
            moved = array[j]
            array[j + 1] = moved
            # the held key rides in the open slot so every snapshot stays a permutation
            array[j] = key
            j -= 1
            recorder.emit(
                array,
                StepKind.MOVE,
                f"Move {moved} one position to the right",
                active=i,
                compare=j + 1,
            )

        array[j + 1] = key
        recorder.emit(array, StepKind.PLACE, f"Place {key} at index {j + 1}", active=j + 1)


def sort_in_place(array: List[Any], recorder: StepRecorder) -> None:
    """Sort the whole of `array`; items only need to support `>`."""
    insertion_pass(array, 0, len(array) - 1, recorder)


def run(values: Any) -> Trace:
    """Return the insertion sort Trace for `values` (never mutated)."""
    array = coerce_values(values)
    rec = StepRecorder(AlgorithmKind.INSERTION_SORT)

    rec.emit(array, StepKind.START, "Starting the Insertion Sort algorithm.")
    sort_in_place(array, rec)
    rec.emit(array, StepKind.COMPLETE, "Insertion Sort complete! The array is now sorted.")
    return rec.finish()
