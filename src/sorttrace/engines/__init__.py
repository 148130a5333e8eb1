"""
Engines package public API.

    from sorttrace.engines import run, ENGINES

`run(kind, values)` dispatches to exactly one engine and returns its Trace.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Union

from sorttrace.engines import hybrid, insertion, merge
from sorttrace.engines.common import check_run_size
from sorttrace.engines.hybrid import DEFAULT_RUN_SIZE
from sorttrace.model import AlgorithmKind, Trace

ENGINES: Dict[AlgorithmKind, Callable[..., Trace]] = {
    AlgorithmKind.INSERTION_SORT: insertion.run,
    AlgorithmKind.MERGE_SORT: merge.run,
    AlgorithmKind.HYBRID_RUN_SORT: hybrid.run,
}

__all__ = ["ENGINES", "DEFAULT_RUN_SIZE", "run"]


def run(
    kind: Union[AlgorithmKind, str],
    values: Any,
    *,
    run_size: int = DEFAULT_RUN_SIZE,
) -> Trace:
    """
    Run the engine selected by `kind` over `values`.

    `run_size` is only used by the hybrid engine but is validated for every kind.

    Raises
    ------
    InvalidInput
        Unknown kind, absent/non-integer values, or run_size <= 0.
    """
    algo = AlgorithmKind.parse(kind)
    run_size = check_run_size(run_size)
    if algo is AlgorithmKind.HYBRID_RUN_SORT:
        return hybrid.run(values, run_size=run_size)
    return ENGINES[algo](values)
