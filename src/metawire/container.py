from __future__ import annotations

import logging
import threading
from contextlib import AbstractContextManager, nullcontext
from typing import Any, TypeVar, cast, get_type_hints

from metawire.exceptions import (
    MetawireAutowireError,
    MetawireCircularDependencyError,
    MetawireNotInjectableError,
)
from metawire.lock_mode import LockMode
from metawire.metadata import AUTOWIRED, MetadataStore, metadata_store
from metawire.registration_decorators import AutowireDescriptor, is_injectable

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Container:
    """Construct and cache one instance per injectable class.

    ``get`` is lazy and idempotent: the first request for a class registers
    it, later requests return the stored instance. ``register`` builds the
    instance with its no-argument constructor, then fills the class's
    ``Autowired`` property by resolving the dependency through ``get``.

    Autowiring cycles are detected and reported with
    ``MetawireCircularDependencyError`` instead of recursing without bound.
    With ``LockMode.THREAD`` (default) resolution is serialized by a
    re-entrant lock, so each class is constructed at most once even when
    several threads call ``get`` concurrently.
    """

    def __init__(
        self,
        *,
        lock_mode: LockMode = LockMode.THREAD,
        metadata: MetadataStore | None = None,
    ) -> None:
        """Initialize an empty container.

        Args:
            lock_mode: ``LockMode.THREAD`` guards the service map with a
                re-entrant lock; ``LockMode.NONE`` assumes single-threaded use.
            metadata: Metadata store to read markers from. Defaults to the
                process-wide ``metadata_store``.

        """
        self._services: dict[type[Any], Any] = {}
        self._resolving: list[type[Any]] = []
        self._metadata = metadata if metadata is not None else metadata_store
        self._lock: AbstractContextManager[Any] = (
            threading.RLock() if lock_mode is LockMode.THREAD else nullcontext()
        )

    def register(self, service_class: type[T]) -> T:
        """Construct, autowire and store the instance for ``service_class``.

        Registering a class that is already stored returns the stored instance
        without constructing again.

        Args:
            service_class: Class marked with ``@injectable()``.

        Returns:
            The stored instance.

        Raises:
            MetawireNotInjectableError: If ``service_class`` is not injectable.
            MetawireCircularDependencyError: If autowiring loops back to a class
                that is still being registered.
            MetawireAutowireError: If the autowired property has no usable type.

        """
        with self._lock:
            if service_class in self._services:
                return cast("T", self._services[service_class])
            if not is_injectable(service_class, self._metadata):
                logger.warning("Refusing to register %s: not injectable", service_class)
                raise MetawireNotInjectableError(service_class)
            if service_class in self._resolving:
                chain = [*self._resolving[self._resolving.index(service_class) :], service_class]
                raise MetawireCircularDependencyError(chain)

            self._resolving.append(service_class)
            try:
                instance = service_class()
                descriptor = self._metadata.get(AUTOWIRED, service_class)
                if descriptor is not None:
                    dependency_type = self._dependency_type(descriptor)
                    setattr(instance, descriptor.property_name, self.get(dependency_type))
            finally:
                self._resolving.pop()

            self._services[service_class] = instance
            logger.debug("Registered %s", service_class.__qualname__)
            return instance

    def get(self, service_class: type[T]) -> T:
        """Return the stored instance for ``service_class``, registering it first if needed."""
        instance = self._services.get(service_class)
        if instance is not None:
            return cast("T", instance)
        with self._lock:
            if service_class in self._services:
                return cast("T", self._services[service_class])
            return self.register(service_class)

    def _dependency_type(self, descriptor: AutowireDescriptor) -> type[Any]:
        if descriptor.dependency_type is not None:
            return descriptor.dependency_type
        try:
            hints = get_type_hints(descriptor.owner)
        except (AttributeError, NameError, TypeError) as error:
            raise MetawireAutowireError(descriptor.owner, descriptor.property_name) from error
        dependency_type = hints.get(descriptor.property_name)
        if not isinstance(dependency_type, type):
            raise MetawireAutowireError(descriptor.owner, descriptor.property_name)
        return dependency_type


container = Container()
"""Process-wide container shared by applications that do not build their own."""
