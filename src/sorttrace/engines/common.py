"""
Helpers shared by the trace engines.

- coerce_values: validate a caller's sequence and return a private list copy.
- check_run_size: validate the hybrid engine's run length.
- StepRecorder: append-only step collector that snapshots the working array.
"""

from __future__ import annotations

from typing import Any, List

import numpy as np

from sorttrace.model import NO_INDEX, AlgorithmKind, InvalidInput, Step, StepKind, Trace

__all__ = ["coerce_values", "check_run_size", "StepRecorder"]


def _is_int_like(x: Any) -> bool:
    # Python ints and NumPy integer scalars; bool is an int subclass but not a value here.
    return isinstance(x, (int, np.integer)) and not isinstance(x, (bool, np.bool_))


def coerce_values(values: Any, *, name: str = "values") -> List[int]:
    """
    Return a fresh list[int] copy of `values`.

    Raises
    ------
    InvalidInput
        If `values` is None, a string/mapping, not iterable, or holds non-integers.
    """
    if values is None:
        raise InvalidInput(f"{name} must not be None")
    if isinstance(values, (str, bytes, dict)):
        raise InvalidInput(f"{name} must be a sequence of integers; got {type(values).__name__}")
    try:
        items = list(values)
    except TypeError as e:
        raise InvalidInput(f"{name} must be a sequence of integers; got {type(values).__name__}") from e

    for i, x in enumerate(items):
        if not _is_int_like(x):
            raise InvalidInput(f"{name}[{i}] must be an integer; got {x!r}")
    return [int(x) for x in items]


def check_run_size(run_size: Any) -> int:
    if not _is_int_like(run_size):
        raise InvalidInput(f"run_size must be an integer; got {run_size!r}")
    if run_size <= 0:
        raise InvalidInput(f"run_size must be positive; got {run_size}")
    return int(run_size)


class StepRecorder:
    """Collects Steps for one engine invocation, then freezes them into a Trace."""

    def __init__(self, algorithm: AlgorithmKind) -> None:
        self.algorithm = algorithm
        self._steps: List[Step] = []

    def emit(
        self,
        array: List[Any],
        kind: StepKind,
        description: str,
        active: int = NO_INDEX,
        compare: int = NO_INDEX,
    ) -> None:
        self._steps.append(Step(tuple(array), active, compare, description, kind))

    def finish(self) -> Trace:
        return Trace(algorithm=self.algorithm, steps=tuple(self._steps))
