from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Generic, TypeVar, overload

from metawire.exceptions import MetawireValidationError

if TYPE_CHECKING:
    from typing_extensions import Self

T = TypeVar("T")

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class BackedProperty(Generic[T]):
    """Base descriptor storing its value in the hidden attribute ``_<name>``.

    Subclasses override ``read`` and ``write`` to add behavior around the
    backing attribute. While the backing attribute is unset, reads return
    ``default`` (``None`` when not given).
    """

    def __init__(self, default: T | None = None) -> None:
        self.default = default
        self.name = ""
        self.private_name = ""

    def __set_name__(self, owner: type[Any], name: str) -> None:
        self.name = name
        self.private_name = f"_{name}"

    @overload
    def __get__(self, instance: None, owner: type[Any] | None = None) -> Self: ...

    @overload
    def __get__(self, instance: object, owner: type[Any] | None = None) -> T: ...

    def __get__(self, instance: object | None, owner: type[Any] | None = None) -> Any:
        if instance is None:
            return self
        return self.read(instance)

    def __set__(self, instance: object, value: T) -> None:
        self.write(instance, value)

    def read(self, instance: object) -> Any:
        return self.load(instance)

    def write(self, instance: object, value: Any) -> None:
        self.store(instance, value)

    def load(self, instance: object) -> Any:
        return getattr(instance, self.private_name, self.default)

    def store(self, instance: object, value: Any) -> None:
        setattr(instance, self.private_name, value)


class Observable(BackedProperty[T]):
    """Log every access and notify the owner about assignments.

    After storing a new value the descriptor calls
    ``instance.property_changed(name, old_value, new_value)`` when the owner
    defines such a callable. Owners without the hook are not an error.

    Examples:
        .. code-block:: python

            class User:
                user_name = Observable("")

                def property_changed(self, name: str, old: Any, new: Any) -> None:
                    print(f"{name}: {old} -> {new}")

    """

    def read(self, instance: object) -> Any:
        logger.debug("Getting %s", self.name)
        return self.load(instance)

    def write(self, instance: object, value: Any) -> None:
        logger.debug("Setting %s to %r", self.name, value)
        old_value = self.load(instance)
        self.store(instance, value)

        hook = getattr(instance, "property_changed", None)
        if callable(hook):
            hook(self.name, old_value, value)


class Validate(BackedProperty[T]):
    """Reject assignments that fail a predicate.

    A rejected assignment raises ``MetawireValidationError`` and leaves the
    backing value unchanged. The default value is not validated.

    Args:
        validator: Predicate returning True for acceptable values.
        message: Message carried by the raised error.
        default: Value returned before the first successful assignment.

    """

    def __init__(
        self,
        validator: Callable[[Any], bool],
        message: str,
        default: T | None = None,
    ) -> None:
        super().__init__(default)
        self.validator = validator
        self.message = message

    def write(self, instance: object, value: Any) -> None:
        if not self.validator(value):
            raise MetawireValidationError(self.name, self.message)
        self.store(instance, value)


class SerializeJson(BackedProperty[Any]):
    """Keep the backing attribute as JSON text.

    Assignments are serialized with ``json.dumps``. Reads deserialize the
    text and return an empty dict when it is unset, empty or malformed; parse
    failures are never raised to the caller.
    """

    def __init__(self) -> None:
        super().__init__(None)

    def read(self, instance: object) -> Any:
        blob = self.load(instance)
        if not blob:
            return {}
        try:
            return json.loads(blob)
        except (RecursionError, TypeError, ValueError):
            logger.debug("Malformed JSON in %s, returning empty mapping", self.private_name)
            return {}

    def write(self, instance: object, value: Any) -> None:
        self.store(instance, json.dumps(value))
