from __future__ import annotations

import asyncio
import functools
import inspect
import json
import logging
import threading
import time
from collections.abc import Awaitable, Callable
from contextlib import nullcontext
from typing import Any, TypeVar, cast

from metawire.exceptions import MetawireInvalidConfigurationError
from metawire.lock_mode import LockMode
from metawire.member_binding import member_aware

F = TypeVar("F", bound=Callable[..., Any])
AsyncF = TypeVar("AsyncF", bound=Callable[..., Awaitable[Any]])

logger = logging.getLogger(__name__)

_MILLISECONDS_PER_SECOND = 1000
_MISS: Any = object()


@member_aware
def measure_time(method: F) -> F:
    """Log the wall-clock duration of each call.

    The result is returned unmodified and failures propagate unchanged.
    Coroutine results are not awaited, so for ``async`` methods only the time
    to create the coroutine is measured.
    """

    @functools.wraps(method)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start = time.perf_counter()
        result = method(*args, **kwargs)
        elapsed_ms = (time.perf_counter() - start) * _MILLISECONDS_PER_SECOND
        logger.info("%s execution time: %.3f ms", method.__name__, elapsed_ms)
        return result

    return cast("F", wrapper)


def caching(
    method: F | None = None,
    *,
    lock_mode: LockMode = LockMode.THREAD,
) -> F | Callable[[F], F]:
    """Memoize a method in one cache shared by every instance of its class.

    The cache key is a canonical JSON rendering of the call arguments
    excluding ``self``; values JSON cannot encode are keyed by their type and
    ``repr``. The cache is unbounded. Failed calls are not cached. For
    ``async`` methods the awaited result is cached, so every call gets a fresh
    awaitable. ``wrapper.cache_clear()`` empties the shared cache.

    Args:
        method: Method to wrap when used as ``@caching``.
        lock_mode: ``LockMode.THREAD`` serializes cache writes so each key is
            stored at most once; ``LockMode.NONE`` skips locking.

    Returns:
        The wrapped method, or a decorator when called with keyword arguments.

    Examples:
        .. code-block:: python

            class Processor:
                @caching
                def compute(self, value: int) -> float: ...

    """

    def decorator(inner: F) -> F:
        cache: dict[str, Any] = {}
        lock = threading.Lock() if lock_mode is LockMode.THREAD else nullcontext()

        def lookup(args: tuple[Any, ...], kwargs: dict[str, Any]) -> tuple[str, Any]:
            key = _cache_key(args, kwargs)
            cached = cache.get(key, _MISS)
            if cached is not _MISS:
                logger.debug("Cache hit for %s", inner.__name__)
            return key, cached

        def store(key: str, result: Any) -> Any:
            with lock:
                return cache.setdefault(key, result)

        if inspect.iscoroutinefunction(inner):

            @functools.wraps(inner)
            async def async_wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
                key, cached = lookup(args, kwargs)
                if cached is not _MISS:
                    return cached
                return store(key, await inner(self, *args, **kwargs))

            wrapper: Any = async_wrapper
        else:

            @functools.wraps(inner)
            def sync_wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
                key, cached = lookup(args, kwargs)
                if cached is not _MISS:
                    return cached
                return store(key, inner(self, *args, **kwargs))

            wrapper = sync_wrapper

        wrapper.cache = cache
        wrapper.cache_clear = cache.clear
        return cast("F", wrapper)

    if method is None:
        return member_aware(decorator)
    return member_aware(decorator)(method)


def retry(attempts: int, delay: float = 0) -> Callable[[AsyncF], AsyncF]:
    """Retry an async method until it succeeds or ``attempts`` tries are used.

    Between a failed attempt and the next one the wrapper sleeps ``delay``
    milliseconds; it never sleeps after the final attempt. When every attempt
    fails the last exception is re-raised. Only ``Exception`` subclasses are
    retried, so cancellation propagates immediately.

    Args:
        attempts: Total number of tries, at least 1.
        delay: Pause between attempts in milliseconds.

    Returns:
        A decorator producing an async wrapper.

    Raises:
        MetawireInvalidConfigurationError: If ``attempts`` is below 1 or
            ``delay`` is negative.

    """
    if attempts < 1:
        msg = f"retry() needs at least 1 attempt, got {attempts}."
        raise MetawireInvalidConfigurationError(msg)
    if delay < 0:
        msg = f"retry() delay must not be negative, got {delay}."
        raise MetawireInvalidConfigurationError(msg)

    def decorator(method: AsyncF) -> AsyncF:
        @functools.wraps(method)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            for attempt in range(1, attempts + 1):
                try:
                    return await _await_result(method(*args, **kwargs))
                except Exception as error:
                    if attempt == attempts:
                        logger.warning(
                            "Attempt %d of %s failed: %r. Giving up.",
                            attempt,
                            method.__name__,
                            error,
                        )
                        raise
                    logger.warning(
                        "Attempt %d of %s failed: %r. Retrying...",
                        attempt,
                        method.__name__,
                        error,
                    )
                    if delay > 0:
                        await asyncio.sleep(delay / _MILLISECONDS_PER_SECOND)

        return cast("AsyncF", wrapper)

    return member_aware(decorator)


def _cache_key(args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    payload = [args, kwargs]
    # mappings mixing key types cannot be sorted, and non-scalar keys cannot be encoded
    for sort_keys in (True, False):
        try:
            return json.dumps(payload, sort_keys=sort_keys, default=_opaque_value)
        except TypeError:
            continue
    return repr(payload)


def _opaque_value(value: Any) -> dict[str, str]:
    value_type = type(value)
    return {
        "__type__": f"{value_type.__module__}.{value_type.__qualname__}",
        "__repr__": repr(value),
    }


async def _await_result(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result
