from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterator, List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

ScanTask = Callable[[], Awaitable[T]]


async def run_with_concurrency(tasks: Sequence[ScanTask[T]], concurrency: int) -> List[T]:
    """
    Run zero-argument coroutine functions with at most `concurrency` in flight.

    min(concurrency, len(tasks)) workers pull the next index from one shared cursor. Claiming is a plain
    next() on an iterator with no await in between, so two workers never get the same index. Results are
    stored by index, so the returned list follows input order regardless of completion order.

    Tasks are expected to handle their own errors; an exception escaping a task propagates out of gather.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be >= 1")
    n = len(tasks)
    if n == 0:
        return []

    results: List[Optional[T]] = [None] * n
    cursor: Iterator[Tuple[int, ScanTask[T]]] = iter(enumerate(tasks))

    async def worker() -> None:
        for i, task in cursor:
            results[i] = await task()

    await asyncio.gather(*(worker() for _ in range(min(concurrency, n))))
    return results  # type: ignore[return-value]
