"""
Sort trace generation engine.

Runs insertion sort, merge sort and a run-threshold hybrid sort over an integer
sequence and returns the complete, replayable log of the algorithm's decisions.

    from sorttrace import run, validate, AlgorithmKind

    trace = run(AlgorithmKind.INSERTION_SORT, [5, 2, 9, 1, 6])
    trace.final_array            # [1, 2, 5, 6, 9]
    validate([1, 2, 5, 6, 9], [1, 2, 5, 6, 9])   # True
"""

from sorttrace.engines import DEFAULT_RUN_SIZE, run
from sorttrace.model import NO_INDEX, AlgorithmKind, InvalidInput, Step, StepKind, Trace
from sorttrace.validate import sorted_target, validate

__version__ = "0.1.0"

__all__ = [
    "run",
    "validate",
    "sorted_target",
    "DEFAULT_RUN_SIZE",
    "NO_INDEX",
    "AlgorithmKind",
    "InvalidInput",
    "Step",
    "StepKind",
    "Trace",
]
