"""Order-preserving parallel map for batch scoring"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def parallel_map(fn: Callable[[T], R], items: Sequence[T], max_workers: int = 1) -> List[R]:
    """
    Apply fn to every item, returning results in input order.

    Runs inline when max_workers <= 1 or there is at most one item.
    Exceptions propagate in input order: the first failing item wins.
    """
    if max_workers <= 1 or len(items) <= 1:
        return [fn(item) for item in items]

    with ThreadPoolExecutor(max_workers=min(max_workers, len(items))) as executor:
        return list(executor.map(fn, items))
