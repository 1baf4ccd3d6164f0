"""
envfmt/utils/async_retry.py

A decorator that retries a whole async operation. It is applied by callers
around a complete fetch, never inside the pagination loop.
"""

import asyncio
import logging
from typing import Any, Callable, Coroutine, Tuple, Type
from typing_extensions import ParamSpec, TypeVar

P = ParamSpec("P")
R = TypeVar("R")

logger = logging.getLogger(__name__)


def async_retry(
    retries: int = 3,
    delay: float = 1.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    noisy: bool = False,
) -> Callable[
    [Callable[P, Coroutine[Any, Any, R]]], Callable[P, Coroutine[Any, Any, R]]
]:
    """Decorates an async function to retry it when it raises one of `retry_on`.

    Exceptions outside `retry_on` propagate immediately. After the last
    attempt the final exception is re-raised unchanged.

    Args:
        retries (int, optional):
            Maximum number of total attempts. 1 means no retry. Defaults to 3.
        delay (float, optional):
            Flat delay in seconds between attempts. Defaults to 1.0.
        retry_on (Tuple[Type[BaseException], ...], optional):
            Exception types that trigger another attempt. Defaults to (Exception,).
        noisy (bool, optional):
            If True, logs a warning for each failed attempt and an error when
            all attempts fail. Defaults to False.

    Returns:
        A decorator producing the retrying wrapper.
    """

    def decorator(
        func: Callable[P, Coroutine[Any, Any, R]]
    ) -> Callable[P, Coroutine[Any, Any, R]]:
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            attempt_number = 1
            while True:
                try:
                    return await func(*args, **kwargs)
                except retry_on as exc:
                    if noisy:
                        logger.warning(
                            "Attempt %d/%d of %r failed: %s",
                            attempt_number,
                            retries,
                            func.__qualname__,
                            exc,
                        )
                    if attempt_number >= retries:
                        if noisy and retries > 1:
                            logger.error(
                                "All %d attempts of %r failed",
                                retries,
                                func.__qualname__,
                            )
                        raise
                    attempt_number += 1
                    await asyncio.sleep(delay)

        return wrapper

    return decorator
