from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

OwnerHook = Callable[[type[Any], str], None]


class MemberBinding:
    """Hold a method until its owning class exists.

    Python function decorators run before the class object is created, so
    metadata that names the owner (``route``, ``Inject`` markers) is recorded
    from ``__set_name__``. After running its hooks the binding replaces itself
    on the owner with the plain function.
    """

    def __init__(self, function: Callable[..., Any], hook: OwnerHook) -> None:
        self.function = function
        self.hooks: list[OwnerHook] = [hook]
        self.__wrapped__ = function
        self.__name__ = getattr(function, "__name__", type(function).__name__)
        self.__qualname__ = getattr(function, "__qualname__", self.__name__)
        self.__doc__ = function.__doc__

    def __set_name__(self, owner: type[Any], name: str) -> None:
        for hook in self.hooks:
            hook(owner, name)
        setattr(owner, name, self.function)

    def __get__(self, instance: object | None, owner: type[Any] | None = None) -> Any:
        return self.function.__get__(instance, owner)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.function(*args, **kwargs)

    def __repr__(self) -> str:
        return f"MemberBinding({self.__qualname__})"


def bind_to_owner(target: Any, hook: OwnerHook) -> MemberBinding:
    """Attach ``hook`` to ``target``, reusing an existing binding when stacked."""
    if isinstance(target, MemberBinding):
        target.hooks.append(hook)
        return target
    return MemberBinding(target, hook)


def member_aware(decorate: Callable[[F], F]) -> Callable[[Any], Any]:
    """Let a method decorator wrap the function held by a ``MemberBinding``.

    Without this a binding wrapped by another decorator would be hidden inside
    a plain function and its ``__set_name__`` hooks would never run.
    """

    @functools.wraps(decorate)
    def apply(target: Any) -> Any:
        if isinstance(target, MemberBinding):
            target.function = decorate(target.function)
            target.__wrapped__ = target.function
            return target
        return decorate(target)

    return apply
