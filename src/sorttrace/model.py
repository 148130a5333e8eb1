"""
Value types exchanged between the trace engines and their callers.

Public API (stable):
    Step, Trace, StepKind, AlgorithmKind, InvalidInput, NO_INDEX

Conventions:
- A Step stores a full snapshot of the working array as a tuple, so it can
  never alias the engine's buffer or the caller's input.
- Index fields use NO_INDEX (-1) to mean "nothing held / nothing compared".
- A Trace is an immutable, ordered sequence of Steps. The first Step is a
  START marker holding the original input; the last is a COMPLETE marker
  holding the sorted result.
"""

from __future__ import annotations

import enum
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple, Union, overload

NO_INDEX: int = -1

__all__ = [
    "NO_INDEX",
    "InvalidInput",
    "StepKind",
    "AlgorithmKind",
    "Step",
    "Trace",
]


class InvalidInput(ValueError):
    """Raised for absent/non-integer sequences, bad run sizes or unknown kinds."""


class StepKind(str, enum.Enum):
    START = "start"
    SELECT = "select"
    COMPARE = "compare"
    MOVE = "move"
    PLACE = "place"
    DIVIDE = "divide"
    MERGE = "merge"
    RUN_START = "run_start"
    COMPLETE = "complete"


class AlgorithmKind(str, enum.Enum):
    INSERTION_SORT = "insertion_sort"
    MERGE_SORT = "merge_sort"
    HYBRID_RUN_SORT = "hybrid_run_sort"

    @classmethod
    def parse(cls, value: Union["AlgorithmKind", str]) -> "AlgorithmKind":
        """
        Resolve an AlgorithmKind from a member or its value string.

        Raises
        ------
        InvalidInput
            If `value` does not name a known algorithm.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as e:
            raise InvalidInput(
                f"Unknown algorithm kind: {value!r}. Supported: {[k.value for k in cls]}"
            ) from e


@dataclass(frozen=True)
class Step:
    array: Tuple[int, ...]
    active_index: int
    compare_index: int
    description: str
    kind: StepKind

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "array": list(self.array),
            "active_index": self.active_index,
            "compare_index": self.compare_index,
            "description": self.description,
        }


@dataclass(frozen=True)
class Trace:
    """
    The complete, already-computed log of one engine invocation.

    Indexing, iteration and len() behave like a read-only tuple of Steps.
    """

    algorithm: AlgorithmKind
    steps: Tuple[Step, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    @overload
    def __getitem__(self, idx: int) -> Step: ...

    @overload
    def __getitem__(self, idx: slice) -> Tuple[Step, ...]: ...

    def __getitem__(self, idx):
        return self.steps[idx]

    @property
    def initial_array(self) -> List[int]:
        return list(self.steps[0].array) if self.steps else []

    @property
    def final_array(self) -> List[int]:
        return list(self.steps[-1].array) if self.steps else []

    def count(self, kind: StepKind) -> int:
        """Number of Steps of the given kind."""
        return sum(1 for s in self.steps if s.kind is kind)

    def counts(self) -> Dict[str, int]:
        """Step count per kind, including zero entries for absent kinds."""
        c = Counter(s.kind.value for s in self.steps)
        return {k.value: int(c.get(k.value, 0)) for k in StepKind}

    def to_records(self) -> List[Dict[str, Any]]:
        return [dict(step.to_dict(), index=i) for i, step in enumerate(self.steps)]
