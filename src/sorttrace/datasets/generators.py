"""
Puzzle-input generators for trace reports and tests.

Game levels sort a handful of small positive item values, so the default
value range is [1, 20]. Larger sizes are still supported for sweeping the
hybrid engine across run boundaries.

Implemented distributions:
- "random":        uniform integers from an inclusive range.
- "few_uniques":   at most k distinct values from an inclusive range, so
                   duplicates (and therefore stability) are exercised.
- "nearly_sorted": [1..n] with ceil(swap_frac * n) random index swaps.
- "reversed":      [n, n-1, ..., 1]; params and RNG unused.

Public API (stable):
    make_dataset(n: int, spec: dict, rng: numpy.random.Generator) -> list[int]

The caller owns the RNG, so a seeded Generator gives reproducible inputs.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

import numpy as np

DEFAULT_RANGE: Tuple[int, int] = (1, 20)

SUPPORTED_DISTS = {
    "random",
    "few_uniques",
    "nearly_sorted",
    "reversed",
}
__all__ = ["SUPPORTED_DISTS", "DEFAULT_RANGE", "make_dataset"]


def make_dataset(n: int, spec: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    """
    Generate a puzzle input of length `n` according to `spec`.

    Parameters
    ----------
    n : int
        Number of elements, >= 0.
    spec : dict
        {"dist": <name>, "params": {...}}. Params per dist:
            random:        {"range": [lo, hi]}          # optional, inclusive
            few_uniques:   {"k": 3, "range": [lo, hi]}  # k >= 1 required
            nearly_sorted: {"swap_frac": 0.1}           # in [0.0, 1.0]
            reversed:      {}
    rng : numpy.random.Generator
        Seeded upstream by the caller.

    Returns
    -------
    list[int]
        Plain Python ints; engines never see NumPy types from here.

    Raises
    ------
    ValueError
        On a negative/non-int `n`, unknown dist or malformed params.
    """
    if not isinstance(n, int) or isinstance(n, bool) or n < 0:
        raise ValueError(f"n must be a nonnegative int; got {n!r}")
    if not isinstance(spec, dict):
        raise ValueError("spec must be a dict")

    dist = spec.get("dist")
    if dist not in SUPPORTED_DISTS:
        raise ValueError(
            f"Unsupported dataset dist: {dist!r}. Supported: {sorted(SUPPORTED_DISTS)}"
        )
    params = spec.get("params") or {}
    if n == 0:
        return []

    if dist == "random":
        lo, hi = _parse_range(params)
        # integers() is half-open; +1 makes hi inclusive
        return rng.integers(lo, hi + 1, size=n, dtype=np.int64).tolist()

    if dist == "few_uniques":
        k = params.get("k")
        if not isinstance(k, int) or isinstance(k, bool) or k < 1:
            raise ValueError(f"few_uniques.params.k must be an integer >= 1; got {k!r}")
        lo, hi = _parse_range(params)
        k = min(k, n, hi - lo + 1)
        pool = lo + rng.choice(hi - lo + 1, size=k, replace=False)
        return [int(v) for v in pool[rng.integers(0, k, size=n)]]

    if dist == "nearly_sorted":
        swap_frac = _parse_swap_frac(params)
        arr = list(range(1, n + 1))
        swaps = int(np.ceil(swap_frac * n))
        idxs = rng.integers(0, n, size=2 * swaps)
        for s in range(swaps):
            i, j = int(idxs[2 * s]), int(idxs[2 * s + 1])
            arr[i], arr[j] = arr[j], arr[i]
        return arr

    return list(range(n, 0, -1))


# ------------------------- helpers ------------------------- #


def _parse_range(params: Dict[str, Any]) -> Tuple[int, int]:
    if "range" not in params:
        return DEFAULT_RANGE
    spec = params["range"]
    if not isinstance(spec, (list, tuple)) or len(spec) != 2:
        raise ValueError("params.range must be a 2-element list/tuple [min, max]")
    lo_raw, hi_raw = spec
    if not all(isinstance(x, (int, np.integer)) and not isinstance(x, bool) for x in spec):
        raise ValueError("params.range values must be integers")
    lo, hi = int(lo_raw), int(hi_raw)
    if lo > hi:
        raise ValueError(f"params.range invalid: min > max ({lo} > {hi})")
    return lo, hi


def _parse_swap_frac(params: Dict[str, Any]) -> float:
    val = params.get("swap_frac", 0.1)
    try:
        x = float(val)
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"nearly_sorted.params.swap_frac must be a float in [0.0, 1.0]; got {val!r}"
        ) from e
    if not 0.0 <= x <= 1.0:
        raise ValueError(f"nearly_sorted.params.swap_frac must be in [0.0, 1.0]; got {x}")
    return x
