"""Bounded fan-out for coroutine work."""

import asyncio
from typing import Awaitable, Callable, List, Sequence, TypeVar

T = TypeVar("T")


class _Aborted(Exception):
    """A queued task that never started because an earlier one failed."""


async def gather_limited(max_concurrent: int, tasks: Sequence[Callable[[], Awaitable[T]]]) -> List[T]:
    """Run ``tasks`` with at most ``max_concurrent`` in flight.

    Waiting tasks start in submission order as slots free up. Results are
    returned in input order whatever the completion order. The first failure
    propagates; tasks still queued at that point never start and those in
    flight are cancelled.
    """
    if max_concurrent < 1:
        raise ValueError(f"max_concurrent must be at least 1, got {max_concurrent}")
    if not tasks:
        return []

    semaphore = asyncio.Semaphore(max_concurrent)
    failed = False

    async def run(task: Callable[[], Awaitable[T]]) -> T:
        nonlocal failed
        async with semaphore:
            if failed:
                raise _Aborted()
            try:
                return await task()
            except BaseException:
                # Set before the slot is released so queued tasks see it
                failed = True
                raise

    running = [asyncio.ensure_future(run(task)) for task in tasks]
    try:
        return list(await asyncio.gather(*running))
    except BaseException as e:
        for pending in running:
            pending.cancel()
        outcomes = await asyncio.gather(*running, return_exceptions=True)
        if isinstance(e, _Aborted):
            cause = next(o for o in outcomes if isinstance(o, BaseException) and not isinstance(o, _Aborted))
            raise cause from None
        raise
