"""First-success combinator over ordered async strategies."""

from typing import Awaitable, Callable, Iterable, TypeVar

T = TypeVar("T")

Strategy = Callable[[], Awaitable[T | None]]


async def first_success(strategies: Iterable[Strategy[T]]) -> T | None:
    """
    Run strategies in order and return the first non-None result.

    Later strategies are never started once one succeeds. Exceptions
    propagate; strategies that can fail softly should return None instead.
    """
    for strategy in strategies:
        result = await strategy()
        if result is not None:
            return result
    return None
