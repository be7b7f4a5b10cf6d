from metawire.class_decorators import log_class, singleton, version
from metawire.composition import compose
from metawire.container import Container, container
from metawire.exceptions import (
    MetawireAutowireError,
    MetawireCircularDependencyError,
    MetawireError,
    MetawireInvalidConfigurationError,
    MetawireNotInjectableError,
    MetawireParameterValidationError,
    MetawireRegistrationError,
    MetawireValidationError,
)
from metawire.lock_mode import LockMode
from metawire.markers import Inject, ValidateParam
from metawire.metadata import (
    AUTOWIRED,
    INJECT_PARAMS,
    INJECTABLE,
    ROUTE,
    VERSION,
    MetadataKey,
    MetadataStore,
    metadata_store,
)
from metawire.method_decorators import caching, measure_time, retry
from metawire.parameters import param_markers
from metawire.properties import Observable, SerializeJson, Validate
from metawire.registration_decorators import (
    AutowireDescriptor,
    Autowired,
    RouteMetadata,
    injectable,
    route,
)

__all__ = [
    "AUTOWIRED",
    "INJECTABLE",
    "INJECT_PARAMS",
    "ROUTE",
    "VERSION",
    "AutowireDescriptor",
    "Autowired",
    "Container",
    "Inject",
    "LockMode",
    "MetadataKey",
    "MetadataStore",
    "MetawireAutowireError",
    "MetawireCircularDependencyError",
    "MetawireError",
    "MetawireInvalidConfigurationError",
    "MetawireNotInjectableError",
    "MetawireParameterValidationError",
    "MetawireRegistrationError",
    "MetawireValidationError",
    "Observable",
    "RouteMetadata",
    "SerializeJson",
    "Validate",
    "ValidateParam",
    "caching",
    "compose",
    "container",
    "injectable",
    "log_class",
    "measure_time",
    "metadata_store",
    "param_markers",
    "retry",
    "route",
    "singleton",
    "version",
]
