from __future__ import annotations

from typing import Any


class MetawireError(Exception):
    """Represent a base class for all metawire-specific failures.

    Catch this type when you want to handle any metawire error path without
    matching each concrete exception class individually.
    """


class MetawireInvalidConfigurationError(MetawireError):
    """Signal invalid decorator or container configuration.

    Raised at decoration time, for example by ``retry(attempts=0)``, so the
    class body fails to load instead of failing on first call.
    """


class MetawireValidationError(MetawireError, ValueError):
    """Signal that a validator rejected a value.

    Raised by the ``Validate`` property descriptor when an assignment fails its
    predicate. The assignment does not take effect.

    Attributes:
        member: Name of the property that rejected the value.
        message: Human-readable message supplied with the validator.

    """

    def __init__(self, member: str, message: str) -> None:
        self.member = member
        self.message = message
        super().__init__(self._describe())

    def _describe(self) -> str:
        return f"Validation failed for {self.member}: {self.message}"


class MetawireParameterValidationError(MetawireValidationError):
    """Signal that a ``ValidateParam`` marker rejected a call argument.

    Raised before the original method body runs.

    Attributes:
        position: 0-based parameter position, not counting ``self``.
        parameter_name: Name of the rejected parameter.
        message: Human-readable message supplied with the validator.

    """

    def __init__(self, position: int, parameter_name: str, message: str) -> None:
        self.position = position
        self.parameter_name = parameter_name
        super().__init__(parameter_name, message)

    def _describe(self) -> str:
        return f"Parameter {self.position} validation failed: {self.message}"


class MetawireRegistrationError(MetawireError):
    """Signal that the container could not register a service.

    Registration errors are fatal to the resolution attempt that raised them
    and are never retried by the container.
    """


class MetawireNotInjectableError(MetawireRegistrationError):
    """Signal registration of a class that was not marked ``@injectable()``.

    Typical fix is decorating the service class with ``@injectable()``.
    """

    def __init__(self, service_class: type[Any]) -> None:
        self.service_class = service_class
        super().__init__(f"Class {service_class.__qualname__} is not injectable")


class MetawireCircularDependencyError(MetawireRegistrationError):
    """Signal an autowiring cycle such as ``A -> B -> A``.

    Attributes:
        chain: Classes in resolution order, ending with the class that closed
            the cycle.

    """

    def __init__(self, chain: list[type[Any]]) -> None:
        self.chain = chain
        path = " -> ".join(service_class.__qualname__ for service_class in chain)
        super().__init__(f"Circular dependency detected: {path}")


class MetawireAutowireError(MetawireRegistrationError):
    """Signal that an ``Autowired`` property has no usable dependency type.

    Raised during registration when the property has neither an explicit type
    nor a resolvable annotation.
    """

    def __init__(self, owner: type[Any], property_name: str) -> None:
        self.owner = owner
        self.property_name = property_name
        super().__init__(
            f"Cannot determine dependency type for {owner.__qualname__}.{property_name}; "
            "annotate the property or pass Autowired(dependency_type).",
        )
