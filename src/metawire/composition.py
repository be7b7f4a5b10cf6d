from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")


def compose(*decorators: Callable[[Any], Any]) -> Callable[[T], T]:
    """Combine decorators into one, keeping stacked-decorator order.

    ``compose(first, second, third)(target)`` equals
    ``first(second(third(target)))``, exactly as if the decorators were written
    top-to-bottom above ``target``: the last decorator is applied first and
    the first decorator ends up outermost. ``compose()`` returns ``target``
    unchanged.

    Examples:
        .. code-block:: python

            service = compose(singleton, log_class, version("1.0"))


            @service
            class ApiService: ...

    """

    def decorator(target: T) -> T:
        result: Any = target
        for apply in reversed(decorators):
            result = apply(result)
        return result

    return decorator
