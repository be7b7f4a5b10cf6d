from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, NamedTuple, TypeVar, overload

from metawire.member_binding import bind_to_owner
from metawire.metadata import AUTOWIRED, INJECTABLE, ROUTE, metadata_store

if TYPE_CHECKING:
    from typing_extensions import Self

    from metawire.metadata import MetadataStore

C = TypeVar("C", bound=type[Any])
T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AutowireDescriptor:
    """Property of ``owner`` that the container fills after construction.

    ``dependency_type`` is ``None`` when it should be read from the property
    annotation at registration time.
    """

    owner: type[Any]
    property_name: str
    dependency_type: type[Any] | None


class RouteMetadata(NamedTuple):
    """Path and handler method recorded by ``route`` for an external router."""

    path: str
    method: str


def injectable() -> Callable[[C], C]:
    """Mark a class as eligible for ``Container.register``.

    Examples:
        .. code-block:: python

            @injectable()
            class LogService: ...

    """

    def decorator(cls: C) -> C:
        metadata_store.define(INJECTABLE, True, cls)  # noqa: FBT003
        return cls

    return decorator


def is_injectable(cls: type[Any], store: MetadataStore = metadata_store) -> bool:
    """Return True when ``cls`` or one of its bases was marked ``@injectable()`` in ``store``."""
    return bool(store.get(INJECTABLE, cls, default=False))


class Autowired(Generic[T]):
    """Declare the property the container fills with a resolved dependency.

    The dependency type is taken from ``dependency_type`` or, when omitted,
    from the property annotation. One autowired property is recorded per
    class; a later declaration on the same class replaces an earlier one.

    Examples:
        .. code-block:: python

            @injectable()
            class AuthService:
                log_service: LogService = Autowired()

    """

    def __init__(self, dependency_type: type[T] | None = None) -> None:
        self.dependency_type = dependency_type
        self.name = ""

    def __set_name__(self, owner: type[Any], name: str) -> None:
        self.name = name
        descriptor = AutowireDescriptor(
            owner=owner,
            property_name=name,
            dependency_type=self.dependency_type,
        )
        metadata_store.define(AUTOWIRED, descriptor, owner)
        metadata_store.define(AUTOWIRED, descriptor, owner, name)

    @overload
    def __get__(self, instance: None, owner: type[Any] | None = None) -> Self: ...

    @overload
    def __get__(self, instance: object, owner: type[Any] | None = None) -> T: ...

    def __get__(self, instance: object | None, owner: type[Any] | None = None) -> Any:
        if instance is None:
            return self
        try:
            return vars(instance)[self.name]
        except KeyError:
            msg = f"{type(instance).__qualname__}.{self.name} has not been autowired yet"
            raise AttributeError(msg) from None

    def __set__(self, instance: object, value: T) -> None:
        vars(instance)[self.name] = value


def route(path: str) -> Callable[[Any], Any]:
    """Record ``RouteMetadata(path, method_name)`` for the owning class.

    The class-level entry holds the most recently declared route; each method
    also keeps its own member-level entry. Routing itself is left to an
    external router.
    """

    def decorator(method: Any) -> Any:
        def record_route(owner: type[Any], name: str) -> None:
            route_metadata = RouteMetadata(path=path, method=name)
            metadata_store.define(ROUTE, route_metadata, owner)
            metadata_store.define(ROUTE, route_metadata, owner, name)
            logger.debug("Route %s -> %s.%s", path, owner.__qualname__, name)

        return bind_to_owner(method, record_route)

    return decorator
