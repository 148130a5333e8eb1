"""
Validation utilities public API.

Re-exports:
    - Solution checking:
        sorted_target
        validate

    - Property checks:
        is_nondecreasing
        first_nondecreasing_violation_index
        is_permutation
        permutation_counter_diff
        assert_no_mutation
        is_stable
        trace_violations
        assert_valid_trace
"""

from .properties import (
    assert_no_mutation,
    assert_valid_trace,
    first_nondecreasing_violation_index,
    is_nondecreasing,
    is_permutation,
    is_stable,
    permutation_counter_diff,
    trace_violations,
)
from .solution import sorted_target, validate

__all__ = [
    "sorted_target",
    "validate",
    "is_nondecreasing",
    "first_nondecreasing_violation_index",
    "is_permutation",
    "permutation_counter_diff",
    "assert_no_mutation",
    "is_stable",
    "trace_violations",
    "assert_valid_trace",
]
