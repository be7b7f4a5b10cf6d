from __future__ import annotations

import threading
from collections.abc import Hashable, Iterator
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")

_NO_ENTRIES: dict[Hashable, Any] = {}


@dataclass(frozen=True, eq=False)
class MetadataKey(Generic[T]):
    """Typed metadata key compared by identity.

    Two keys created with the same name are still distinct, so metadata kinds
    defined by different modules never collide.

    Examples:
        .. code-block:: python

            OWNER: MetadataKey[str] = MetadataKey("owner")
            metadata_store.define(OWNER, "billing", Invoice)

    """

    name: str

    def __repr__(self) -> str:
        return f"MetadataKey({self.name!r})"


VERSION: MetadataKey[str] = MetadataKey("version")
INJECTABLE: MetadataKey[bool] = MetadataKey("injectable")
AUTOWIRED: MetadataKey[Any] = MetadataKey("autowired")
ROUTE: MetadataKey[Any] = MetadataKey("route")
INJECT_PARAMS: MetadataKey[dict[int, str]] = MetadataKey("inject:params")


@dataclass
class MetadataStore:
    """Associative registry of ``(target, member, key) -> value`` entries.

    ``target`` is usually a class; ``member`` is ``None`` for class-level
    entries and a method or property name for member-level entries. Defining
    the same triple twice overwrites the previous value.

    ``get`` falls back to inherited targets: the MRO of a class target, or the
    class MRO of an instance target. ``get_own`` only looks at ``target``
    itself.
    """

    _entries: dict[tuple[Any, str | None], dict[Hashable, Any]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def define(
        self,
        key: MetadataKey[T] | Hashable,
        value: T,
        target: Any,
        member: str | None = None,
    ) -> None:
        """Store ``value`` under ``key`` for ``target`` and optional ``member``."""
        with self._lock:
            self._entries.setdefault((target, member), {})[key] = value

    def get(
        self,
        key: Any,
        target: Any,
        member: str | None = None,
        default: Any = None,
    ) -> Any:
        """Return the value for ``key``, searching inherited targets, or ``default``."""
        for candidate in _lookup_chain(target):
            entries = self._entries_for(candidate, member)
            if key in entries:
                return entries[key]
        return default

    def get_own(
        self,
        key: Any,
        target: Any,
        member: str | None = None,
        default: Any = None,
    ) -> Any:
        """Return the value defined directly on ``target``, or ``default``."""
        return self._entries_for(target, member).get(key, default)

    def has(self, key: Any, target: Any, member: str | None = None) -> bool:
        """Return True when ``key`` is defined on ``target`` or an inherited target."""
        return any(
            key in self._entries_for(candidate, member) for candidate in _lookup_chain(target)
        )

    def has_own(self, key: Any, target: Any, member: str | None = None) -> bool:
        """Return True when ``key`` is defined directly on ``target``."""
        return key in self._entries_for(target, member)

    def get_keys(self, target: Any, member: str | None = None) -> list[Any]:
        """Return keys visible on ``target``, own keys first, without duplicates."""
        keys: list[Any] = []
        for candidate in _lookup_chain(target):
            for key in self._entries_for(candidate, member):
                if key not in keys:
                    keys.append(key)
        return keys

    def get_own_keys(self, target: Any, member: str | None = None) -> list[Any]:
        """Return keys defined directly on ``target``."""
        return list(self._entries_for(target, member))

    def delete(self, key: Any, target: Any, member: str | None = None) -> bool:
        """Remove an own entry. Return True when something was removed."""
        with self._lock:
            entries = self._entries_for(target, member)
            if key not in entries:
                return False
            del entries[key]
            if not entries:
                del self._entries[(target, member)]
            return True

    def _entries_for(self, target: Any, member: str | None) -> dict[Hashable, Any]:
        # a hashable container such as a tuple can still hold unhashable items
        try:
            return self._entries.get((target, member), _NO_ENTRIES)
        except TypeError:
            return _NO_ENTRIES


def _lookup_chain(target: Any) -> Iterator[Any]:
    if isinstance(target, type):
        yield from target.__mro__
        return
    if isinstance(target, Hashable):
        yield target
    yield from type(target).__mro__


metadata_store = MetadataStore()
"""Process-wide metadata store used by all metawire decorators."""
