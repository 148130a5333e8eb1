"""
Solution checking for player-submitted arrangements.

The target for a puzzle is Python's built-in `sorted()` of its input: correct
total order for integers, deterministic, and it never mutates its argument.

Public API (stable):
    sorted_target(values) -> list[int]
    validate(candidate, target) -> bool

Conventions:
- `validate` is a strict positional comparison. A candidate holding the right
  values in a different order is rejected even when it is also ascending.
"""

from __future__ import annotations

from typing import Any, List

from sorttrace.engines.common import coerce_values

__all__ = ["sorted_target", "validate"]


def sorted_target(values: Any) -> List[int]:
    """
    Return the ascending-sorted target for `values` as a new list.

    Raises
    ------
    InvalidInput
        If `values` is None or holds non-integers.
    """
    return sorted(coerce_values(values))


def validate(candidate: Any, target: Any) -> bool:
    """
    Return True iff `candidate` equals `target` at every index.

    Parameters
    ----------
    candidate : sequence[int]
        The arrangement submitted by the player.
    target : sequence[int]
        The expected arrangement, normally `sorted_target(initial)`.

    Raises
    ------
    InvalidInput
        If either argument is None or holds non-integers.
    """
    cand = coerce_values(candidate, name="candidate")
    tgt = coerce_values(target, name="target")
    if len(cand) != len(tgt):
        return False
    return all(c == t for c, t in zip(cand, tgt))
