from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from metawire.metadata import VERSION, metadata_store

C = TypeVar("C", bound=type[Any])

logger = logging.getLogger(__name__)

_UNSET: Any = object()


def version(value: str) -> Callable[[C], C]:
    """Tag a class and each of its instances with a version string.

    The version is recorded as ``VERSION`` metadata on the decorated class and
    assigned to ``instance.version`` after the original ``__init__`` returns.
    Construction arguments pass through unchanged.

    Args:
        value: Version string, for example ``"1.0"``.

    Returns:
        A class decorator producing a versioned subclass.

    Examples:
        .. code-block:: python

            @version("1.0")
            class ApiService: ...


            assert ApiService().version == "1.0"
            assert metadata_store.get(VERSION, ApiService) == "1.0"

    """

    def decorator(cls: C) -> C:
        metadata_store.define(VERSION, value, cls)

        def __init__(self: Any, *args: Any, **kwargs: Any) -> None:
            super(versioned, self).__init__(*args, **kwargs)
            self.version = value

        versioned = _derive(cls, type(cls), {"__init__": __init__})
        return versioned

    return decorator


def log_class(cls: C) -> C:
    """Log class creation at decoration time and on every construction.

    Construction is intercepted through the metaclass call path, so
    ``cls(...)`` logs ``Creating: <name>`` each time an instance is built.
    """
    logger.info("Creating: %s", cls.__name__)
    base_meta = type(cls)

    class LoggingMeta(base_meta):  # type: ignore[misc,valid-type]
        def __call__(klass, *args: Any, **kwargs: Any) -> Any:
            logger.info("Creating: %s", cls.__name__)
            return super().__call__(*args, **kwargs)

    return _derive(cls, LoggingMeta)


def singleton(cls: C) -> C:
    """Replace a class with one that constructs at most one instance.

    The first call constructs and caches the instance. Later calls return the
    cached instance and ignore their arguments; ``__init__`` is not re-run.
    The replacement subclasses the original, so ``isinstance`` checks, methods
    and class attributes are unaffected. Subclasses of the replacement
    construct normally.
    """
    base_meta = type(cls)
    lock = threading.RLock()
    instance: Any = _UNSET

    class SingletonMeta(base_meta):  # type: ignore[misc,valid-type]
        def __call__(klass, *args: Any, **kwargs: Any) -> Any:
            nonlocal instance
            if klass is not replacement:
                return super().__call__(*args, **kwargs)
            if instance is not _UNSET:
                return instance
            with lock:
                if instance is _UNSET:
                    instance = super().__call__(*args, **kwargs)
            return instance

    replacement = _derive(cls, SingletonMeta)
    return replacement


def _derive(
    cls: C,
    metaclass: type[Any],
    namespace: dict[str, Any] | None = None,
) -> C:
    """Build a subclass of ``cls`` that looks like ``cls`` from the outside."""
    body: dict[str, Any] = {
        "__module__": cls.__module__,
        "__qualname__": cls.__qualname__,
        "__doc__": cls.__doc__,
        "__wrapped__": cls,
    }
    if namespace:
        body.update(namespace)
    return metaclass(cls.__name__, (cls,), body)
