"""
Ordered parallel map over independent, read-only evaluations.

With max_workers of None or 1 the map runs in the calling thread; otherwise
items are evaluated on a thread pool and results are returned in input order.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def map_ordered(func: Callable[[T], R], items: Iterable[T], max_workers: Optional[int] = None) -> List[R]:
    """Apply func to every item, preserving order. Exceptions propagate."""
    items = list(items)
    if max_workers is None or max_workers <= 1 or len(items) <= 1:
        return [func(item) for item in items]

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(func, items))


__all__ = ["map_ordered"]
