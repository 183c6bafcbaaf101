"""
Causality analysis over two clock snapshots.

All functions are pure and accept any ``Mapping[str, int]`` (ClockSnapshot or
a plain dict decoded from the wire). Only keys present in both snapshots take
part in a comparison; a key missing on one side is skipped, never read as 0.
"""

from typing import Literal, Mapping

Relation = Literal['before', 'after', 'concurrent']


def happened_before(a: Mapping, b: Mapping) -> bool:
    """
    Check whether ``a`` causally precedes ``b``.

    True iff every shared counter of ``a`` is <= the one in ``b`` and at
    least one is strictly smaller. No shared keys means not-before.
    """
    any_less = False
    for pid, value in a.items():
        if pid not in b:
            continue
        other = b[pid]
        if value > other:
            return False
        if value < other:
            any_less = True
    return any_less


def happened_after(a: Mapping, b: Mapping) -> bool:
    """Check whether ``a`` causally follows ``b``."""
    return happened_before(b, a)


def is_concurrent_with(a: Mapping, b: Mapping) -> bool:
    """
    Check whether neither snapshot precedes the other.

    Identical snapshots are reported as concurrent.
    """
    return not happened_before(a, b) and not happened_before(b, a)


def compare(a: Mapping, b: Mapping) -> int:
    """
    Three-way causal comparison.

    Returns:
        -1 if a happened before b, 1 if a happened after b, 0 if concurrent.
        0 does not mean equal; this is not a total order.
    """
    if happened_before(a, b):
        return -1
    if happened_before(b, a):
        return 1
    return 0


def relation(a: Mapping, b: Mapping) -> Relation:
    """Name the relation of ``a`` to ``b``: 'before', 'after' or 'concurrent'."""
    result = compare(a, b)
    if result < 0:
        return 'before'
    elif result > 0:
        return 'after'
    return 'concurrent'
