from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable
from typing import Any

from metawire.exceptions import MetawireParameterValidationError
from metawire.markers import Inject, MarkedParameter, ValidateParam, extract_marked_parameters
from metawire.member_binding import MemberBinding, bind_to_owner
from metawire.metadata import INJECT_PARAMS, metadata_store

logger = logging.getLogger(__name__)


def param_markers(method: Any) -> Any:
    """Apply ``ValidateParam`` and ``Inject`` markers found in a method signature.

    Each ``ValidateParam`` installs its own wrapper layer, in parameter
    declaration order, each layer wrapping the previous one; a rejected
    argument raises ``MetawireParameterValidationError`` before the method body
    runs. ``Inject`` markers are recorded as ``INJECT_PARAMS`` metadata once the
    owning class is created.

    Args:
        method: Method whose parameters use ``Annotated[..., marker]``.

    Returns:
        A binding that installs the wrapped method on its owning class.

    Examples:
        .. code-block:: python

            class Geometry:
                @param_markers
                def area(
                    self,
                    width: Annotated[float, ValidateParam(is_positive, "Width must be positive")],
                    height: Annotated[float, ValidateParam(is_positive, "Height must be positive")],
                ) -> float:
                    return width * height

    """
    function = method.function if isinstance(method, MemberBinding) else method
    marked_parameters = extract_marked_parameters(function)
    signature = inspect.signature(function)

    wrapped = function
    for marked in marked_parameters:
        if isinstance(marked.marker, ValidateParam):
            wrapped = _validation_layer(wrapped, signature, marked, marked.marker)

    if isinstance(method, MemberBinding):
        method.function = wrapped
        method.__wrapped__ = wrapped

    injected = {
        marked.position: marked.marker.service_identifier
        for marked in marked_parameters
        if isinstance(marked.marker, Inject)
    }

    def record_injections(owner: type[Any], name: str) -> None:
        if not injected:
            return
        existing: dict[int, str] = dict(metadata_store.get_own(INJECT_PARAMS, owner, name) or {})
        existing.update(injected)
        metadata_store.define(INJECT_PARAMS, existing, owner, name)
        logger.debug("Recorded injection points for %s.%s: %s", owner.__qualname__, name, existing)

    return bind_to_owner(method if isinstance(method, MemberBinding) else wrapped, record_injections)


def _validation_layer(
    function: Callable[..., Any],
    signature: inspect.Signature,
    marked: MarkedParameter,
    marker: ValidateParam,
) -> Callable[..., Any]:
    parameter_name = marked.parameter.name

    @functools.wraps(function)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        bound = signature.bind(*args, **kwargs)
        bound.apply_defaults()
        if not marker.validator(bound.arguments[parameter_name]):
            raise MetawireParameterValidationError(marked.position, parameter_name, marker.message)
        return function(*args, **kwargs)

    return wrapper
