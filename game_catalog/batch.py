"""
Expansion of a starting identifier into a contiguous batch.
"""

from typing import List


def expand(start_id: int, count: int) -> List[int]:
    """
    Return ``[start_id, start_id + 1, ..., start_id + count - 1]``.

    Raises:
        ValueError: if ``count`` is less than 1
    """
    if count < 1:
        raise ValueError(f"Batch size must be at least 1, got {count}")
    return list(range(start_id, start_id + count))
