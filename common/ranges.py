"""Range helpers for the distributed sum: work division and closed-form sums."""

from typing import List, Tuple


def range_sum(start: int, end: int) -> int:
    """
    Sum of the integers in ``[start, end]`` using the closed form.

    Args:
        start: First number (>= 1)
        end: Last number (>= start - 1; an empty range sums to 0)

    Returns:
        start + (start + 1) + ... + end
    """
    sum_to_end = end * (end + 1) // 2
    sum_before_start = (start - 1) * start // 2 if start > 1 else 0
    return sum_to_end - sum_before_start


def divide_work(n: int, server_count: int) -> List[Tuple[int, int]]:
    """
    Split ``1..n`` into ``server_count`` contiguous ranges.

    The first ``n % server_count`` ranges get one extra number. When there
    are more servers than numbers the trailing ranges are empty
    (``end == start - 1``).

    Args:
        n: Upper bound of the sum (>= 1)
        server_count: Number of servers sharing the work (>= 1)

    Returns:
        List of (start, end) tuples, one per server

    Raises:
        ValueError: If n or server_count is not positive
    """
    if n < 1:
        raise ValueError(f"n must be a positive integer, got {n}")
    if server_count < 1:
        raise ValueError(f"server_count must be positive, got {server_count}")

    numbers_per_server, remainder = divmod(n, server_count)
    ranges = []
    current_start = 1
    for i in range(server_count):
        size = numbers_per_server + (1 if i < remainder else 0)
        current_end = current_start + size - 1
        ranges.append((current_start, current_end))
        current_start = current_end + 1
    return ranges
