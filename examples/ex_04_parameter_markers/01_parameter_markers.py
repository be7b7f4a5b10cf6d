"""Parameter markers: argument validation and injection points.

This module demonstrates:

1. ``ValidateParam`` markers checked before the method body runs.
2. The failing parameter's position reported by the error.
3. ``Inject`` markers recorded as ``INJECT_PARAMS`` metadata on the class.
"""

from __future__ import annotations

from typing import Annotated, Any

from metawire import (
    INJECT_PARAMS,
    Inject,
    MetawireParameterValidationError,
    ValidateParam,
    metadata_store,
    param_markers,
)


def is_positive(value: object) -> bool:
    return isinstance(value, (int, float)) and value > 0


class Geometry:
    @param_markers
    def calculate_area_square(
        self,
        width: Annotated[float, ValidateParam(is_positive, "Width must be positive")],
        height: Annotated[float, ValidateParam(is_positive, "Height must be positive")],
    ) -> float:
        return width * height


class UserService:
    @param_markers
    def process_user(self, logger: Annotated[Any, Inject("LoggerService")], user: str) -> str:
        return logger(user)


def main() -> None:
    geometry = Geometry()
    print(f"area={geometry.calculate_area_square(5, 10)}")  # => area=50

    try:
        geometry.calculate_area_square(5, -1)
    except MetawireParameterValidationError as error:
        print(error)  # => Parameter 1 validation failed: Height must be positive

    injections = metadata_store.get_own(INJECT_PARAMS, UserService, "process_user")
    print(f"injections={injections}")  # => injections={0: 'LoggerService'}
    print(UserService().process_user(str.upper, "ada"))  # => ADA


if __name__ == "__main__":
    main()
