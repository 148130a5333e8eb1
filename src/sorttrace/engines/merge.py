"""
Recursive top-down merge sort with full step emission.

Public API (stable):
    run(values) -> Trace
    merge(array, left, mid, right, recorder) -> None
    sort_in_place(array, recorder) -> None

Conventions:
- Divide point is mid = left + (right - left) // 2.
- On equal values the left run wins, which keeps the sort stable.
- A one-sided tail copy emits PLACE steps only; no comparison happens there.
"""

from __future__ import annotations

from typing import Any, List

from sorttrace.engines.common import StepRecorder, coerce_values
from sorttrace.model import AlgorithmKind, StepKind, Trace

__all__ = ["run", "merge", "sort_in_place"]


def merge(array: List[Any], left: int, mid: int, right: int, recorder: StepRecorder) -> None:
    """
    Merge the sorted runs array[left..mid] and array[mid+1..right] in place.

    Both runs are copied into temporary buffers before any write, so the
    compare steps refer to source positions in the original layout. After
    each placement array[left..right] holds the merged prefix followed by the
    unconsumed elements of both runs.
    """
    recorder.emit(
        array,
        StepKind.MERGE,
        f"Merging subarrays from {left} to {mid} and from {mid + 1} to {right}",
        active=left,
        compare=right,
    )

    lhs = array[left:mid + 1]
    rhs = array[mid + 1:right + 1]
    i = j = 0
    k = left

    while i < len(lhs) and j < len(rhs):
        recorder.emit(
            array,
            StepKind.COMPARE,
            f"Compare {lhs[i]} with {rhs[j]}",
            active=left + i,
            compare=mid + 1 + j,
        )
        if lhs[i] <= rhs[j]:
            v = lhs[i]
            i += 1
        else:
            v = rhs[j]
            j += 1
        # merged prefix, then the unconsumed runs: the snapshot stays a permutation
        array[left:right + 1] = array[left:k] + [v] + lhs[i:] + rhs[j:]
        recorder.emit(array, StepKind.PLACE, f"Place {v} at index {k}", active=k)
        k += 1

    for tail, pos in ((lhs, i), (rhs, j)):
        for v in tail[pos:]:
            array[k] = v
            recorder.emit(array, StepKind.PLACE, f"Place remaining {v} at index {k}", active=k)
            k += 1


def _sort_range(array: List[Any], left: int, right: int, recorder: StepRecorder) -> None:
    if left >= right:
        return
    mid = left + (right - left) // 2
    recorder.emit(
        array,
        StepKind.DIVIDE,
        f"Dividing array from index {left} to {right}",
        active=left,
        compare=right,
    )
    _sort_range(array, left, mid, recorder)
    _sort_range(array, mid + 1, right, recorder)
    merge(array, left, mid, right, recorder)


def sort_in_place(array: List[Any], recorder: StepRecorder) -> None:
    """Sort the whole of `array`; items only need to support `<=`."""
    _sort_range(array, 0, len(array) - 1, recorder)


def run(values: Any) -> Trace:
    """Return the merge sort Trace for `values` (never mutated)."""
    array = coerce_values(values)
    rec = StepRecorder(AlgorithmKind.MERGE_SORT)

    rec.emit(array, StepKind.START, "Starting the Merge Sort algorithm.")
    sort_in_place(array, rec)
    rec.emit(array, StepKind.COMPLETE, "Merge Sort complete! The array is now sorted.")
    return rec.finish()
