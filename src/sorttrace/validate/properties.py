"""
Property helpers for checking sort results and traces.

Used by the test suite and, when `check_traces` is on, by the report runner.

Public API (stable):
    is_nondecreasing(xs) -> bool
    first_nondecreasing_violation_index(xs) -> int | None
    is_permutation(a, b) -> bool
    permutation_counter_diff(a, b) -> dict[int, int]
    assert_no_mutation(before, after) -> None
    is_stable(values, order) -> bool
    trace_violations(trace, values) -> list[str]
    assert_valid_trace(trace, values) -> None

Notes
-----
- Stability cannot be read off plain values since equal keys look alike.
  `is_stable` instead takes the original indices in output order, which the
  tests recover by sorting (value, original_index) tags.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Sequence

from sorttrace.model import NO_INDEX, StepKind, Trace

__all__ = [
    "is_nondecreasing",
    "first_nondecreasing_violation_index",
    "is_permutation",
    "permutation_counter_diff",
    "assert_no_mutation",
    "is_stable",
    "trace_violations",
    "assert_valid_trace",
]


def is_nondecreasing(xs: Sequence[int]) -> bool:
    """Return True iff xs[i] <= xs[i+1] for all i."""
    return first_nondecreasing_violation_index(xs) is None


def first_nondecreasing_violation_index(xs: Sequence[int]) -> int | None:
    """Return the first index i where xs[i] > xs[i+1], or None if nondecreasing."""
    for i in range(len(xs) - 1):
        if xs[i] > xs[i + 1]:
            return i
    return None


def is_permutation(a: Sequence[int], b: Sequence[int]) -> bool:
    """Return True iff `a` and `b` hold exactly the same multiset of values."""
    return len(a) == len(b) and Counter(a) == Counter(b)


def permutation_counter_diff(a: Sequence[int], b: Sequence[int]) -> Dict[int, int]:
    """
    Return value -> (count in a - count in b), omitting zero entries.

    Positive values are extra occurrences in `a`, negative ones in `b`.
    """
    diff = Counter(a)
    diff.subtract(Counter(b))
    return {k: d for k, d in diff.items() if d != 0}


def assert_no_mutation(before: Sequence[int], after: Sequence[int]) -> None:
    """
    Raise AssertionError naming the first difference if `after` != `before`.
    """
    if len(before) != len(after):
        raise AssertionError(
            f"Input mutated: length changed from {len(before)} to {len(after)}"
        )
    for i, (x, y) in enumerate(zip(before, after)):
        if x != y:
            raise AssertionError(f"Input mutated at index {i}: before={x}, after={y}")


def is_stable(values: Sequence[int], order: Sequence[int]) -> bool:
    """
    Return True iff `order` (original indices, in output order) keeps equal
    values in their original relative order.
    """
    last_seen: Dict[int, int] = {}
    for idx in order:
        v = values[idx]
        if v in last_seen and last_seen[v] > idx:
            return False
        last_seen[v] = idx
    return True


def trace_violations(trace: Trace, values: Sequence[int]) -> List[str]:
    """
    Check the structural invariants of `trace` produced from `values`.

    Returns a list of human-readable problems; empty means the trace is valid.
    """
    problems: List[str] = []
    original = list(values)
    n = len(original)

    if len(trace) < 2:
        return [f"trace has {len(trace)} steps; expected at least start and complete"]

    first, last = trace[0], trace[-1]
    if first.kind is not StepKind.START:
        problems.append(f"first step is {first.kind.value!r}, expected 'start'")
    if (first.active_index, first.compare_index) != (NO_INDEX, NO_INDEX):
        problems.append("start step must hold no indices")
    if list(first.array) != original:
        problems.append("start step array differs from the input")

    if last.kind is not StepKind.COMPLETE:
        problems.append(f"last step is {last.kind.value!r}, expected 'complete'")
    if (last.active_index, last.compare_index) != (NO_INDEX, NO_INDEX):
        problems.append("complete step must hold no indices")
    if list(last.array) != sorted(original):
        i = first_nondecreasing_violation_index(last.array)
        problems.append(f"complete step array is not the sorted input (first violation at {i})")

    expected = Counter(original)
    for pos, step in enumerate(trace):
        if len(step.array) != n or Counter(step.array) != expected:
            problems.append(f"step {pos} ({step.kind.value}) is not a permutation of the input")
        for name, idx in (("active_index", step.active_index), ("compare_index", step.compare_index)):
            if idx != NO_INDEX and not 0 <= idx < n:
                problems.append(f"step {pos} {name}={idx} out of range for n={n}")
        if 0 < pos < len(trace) - 1 and step.kind in (StepKind.START, StepKind.COMPLETE):
            problems.append(f"step {pos} is an unexpected {step.kind.value!r} marker")

    return problems


def assert_valid_trace(trace: Trace, values: Sequence[int]) -> None:
    problems = trace_violations(trace, values)
    if problems:
        raise AssertionError("Invalid trace: " + "; ".join(problems))
