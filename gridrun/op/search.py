# gridrun/op/search.py
# Monotone search driver: largest k in [0, n] accepted by a monotone predicate

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, List, Tuple
from .bytes import encode_probes
from .hash import hash_bytes

Predicate = Callable[[int], bool]


@dataclass
class SearchRc:
    """
    Search receipt.

    probes: (k, result) in evaluation order, the bound check first
    lo, hi: final half-open bracket [lo, hi), hi - lo == 1
    trace_hash: BLAKE3 of the LEB128-framed probe trace
    """
    n: int
    k: int
    lo: int
    hi: int
    probes: List[Tuple[int, bool]] = field(default_factory=list)
    trace_hash: str = ""


def search_max_k(n: int, predicate: Predicate) -> Tuple[int, SearchRc]:
    """
    Binary search the largest k in [0, n] with predicate(k) true.

    Invariant: predicate(a) is true (k = 0 is trivially feasible) and
    predicate(b) is false. b starts at n+1, which is evaluated once up
    front as the degenerate bound check.

    Args:
        n: grid size (n >= 1)
        predicate: monotone non-increasing boolean function of k

    Returns:
        (k, SearchRc)

    Raises:
        ValueError: if n < 1 or the upper bound n+1 is accepted
    """
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")

    probes: List[Tuple[int, bool]] = []

    def probe(k: int) -> bool:
        ok = bool(predicate(k))
        probes.append((k, ok))
        return ok

    # Half-open bracket [a, b)
    a, b = 0, n + 1
    if probe(b):
        raise ValueError(f"predicate accepted k={b} > n={n}; not a valid size predicate")

    while b - a > 1:
        mid = a + (b - a) // 2
        if probe(mid):
            a = mid
        else:
            b = mid

    rc = SearchRc(n=n, k=a, lo=a, hi=b, probes=probes,
                  trace_hash=hash_bytes(encode_probes(probes)))
    return a, rc


def scan_max_k(n: int, predicate: Predicate) -> int:
    """
    Linear reference scan: largest k in [0, n] with predicate(k) true.

    Does not assume monotonicity; used to cross-check search_max_k.
    """
    best = 0
    for k in range(n + 1):
        if predicate(k):
            best = k
    return best
