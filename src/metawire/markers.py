from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any, NamedTuple, get_args, get_origin, get_type_hints

from metawire.exceptions import MetawireInvalidConfigurationError

logger = logging.getLogger(__name__)

_ANNOTATED_MARKER_MIN_ARGS = 2
_BOUND_PARAMETER_NAMES = frozenset({"self", "cls"})
_MARKER_NAME = re.compile(r"\b(?:ValidateParam|Inject)\b")


class ValidateParam(NamedTuple):
    """Validate one method argument before the method body runs.

    Attach to a parameter through ``typing.Annotated`` and decorate the method
    with ``@param_markers``.

    Examples:
        .. code-block:: python

            class Geometry:
                @param_markers
                def area(
                    self,
                    width: Annotated[float, ValidateParam(is_positive, "Width must be positive")],
                ) -> float: ...

    """

    validator: Callable[[Any], bool]
    message: str


class Inject(NamedTuple):
    """Record which service a parameter expects.

    The marker is declarative only: ``@param_markers`` stores
    ``{position: service_identifier}`` as ``INJECT_PARAMS`` metadata on the
    owning class and method, and nothing substitutes the argument at call time.
    """

    service_identifier: str


@dataclass(frozen=True, slots=True)
class MarkedParameter:
    """A parameter carrying a metawire marker in its annotation."""

    position: int
    parameter: inspect.Parameter
    marker: ValidateParam | Inject


def extract_marked_parameters(function: Callable[..., Any]) -> tuple[MarkedParameter, ...]:
    """Return marked parameters in declaration order.

    Positions are 0-based and do not count a leading ``self`` or ``cls``
    parameter. A parameter with several markers yields one entry per marker.
    """
    signature = inspect.signature(function)
    annotations = _resolved_annotations(function)
    parameters = list(signature.parameters.values())
    if parameters and parameters[0].name in _BOUND_PARAMETER_NAMES:
        parameters = parameters[1:]

    marked: list[MarkedParameter] = []
    for position, parameter in enumerate(parameters):
        annotation = annotations.get(parameter.name, parameter.annotation)
        marked.extend(
            MarkedParameter(position=position, parameter=parameter, marker=marker)
            for marker in _extract_markers(annotation)
        )
    return tuple(marked)


def _resolved_annotations(function: Callable[..., Any]) -> dict[str, Any]:
    try:
        return get_type_hints(function, include_extras=True)
    except (AttributeError, NameError, SyntaxError, TypeError):
        logger.debug("Resolving annotations of %s one parameter at a time", function)

    globalns = getattr(inspect.unwrap(function), "__globals__", {})
    resolved: dict[str, Any] = {}
    for name, annotation in (getattr(function, "__annotations__", None) or {}).items():
        if not isinstance(annotation, str):
            resolved[name] = annotation
            continue
        try:
            resolved[name] = _resolve_annotation(annotation, globalns)
        except (AttributeError, NameError, SyntaxError, TypeError) as error:
            if _MARKER_NAME.search(annotation):
                msg = (
                    f"Cannot resolve the annotation of parameter {name!r} of "
                    f"{getattr(function, '__qualname__', function)!s}: {annotation}. "
                    "Markers must only reference module-level names."
                )
                raise MetawireInvalidConfigurationError(msg) from error
    return resolved


def _resolve_annotation(annotation: str, globalns: dict[str, Any]) -> Any:
    holder = type("AnnotationHolder", (), {"__annotations__": {"value": annotation}})
    return get_type_hints(holder, globalns=globalns, include_extras=True)["value"]


def _extract_markers(annotation: Any) -> tuple[ValidateParam | Inject, ...]:
    if annotation is inspect.Parameter.empty or isinstance(annotation, str):
        return ()
    if get_origin(annotation) is not Annotated:
        return ()
    annotation_args = get_args(annotation)
    if len(annotation_args) < _ANNOTATED_MARKER_MIN_ARGS:
        return ()
    return tuple(item for item in annotation_args[1:] if isinstance(item, (ValidateParam, Inject)))
