"""Property descriptors: observing, validating and serializing attributes.

This module demonstrates:

1. ``Observable`` calling the owner's ``property_changed`` hook on assignment.
2. ``Validate`` rejecting a value and keeping the previous one.
3. ``SerializeJson`` storing JSON text and returning ``{}`` for malformed data.
"""

from __future__ import annotations

from typing import Any

from metawire import MetawireValidationError, Observable, SerializeJson, Validate


def is_non_negative_int(value: object) -> bool:
    return isinstance(value, int) and value >= 0


class User:
    user_name = Observable("")
    age = Validate(is_non_negative_int, "Age must be non-negative")
    settings = SerializeJson()

    def property_changed(self, name: str, old_value: Any, new_value: Any) -> None:
        print(f"{name}: {old_value!r} -> {new_value!r}")  # => user_name: '' -> 'ada'


def main() -> None:
    user = User()
    user.user_name = "ada"

    user.age = 36
    try:
        user.age = -1
    except MetawireValidationError as error:
        print(error)  # => Validation failed for age: Age must be non-negative
    print(f"age={user.age}")  # => age=36

    user.settings = {"theme": "dark"}
    print(f"stored={user._settings}")  # => stored={"theme": "dark"}
    print(f"settings={user.settings}")  # => settings={'theme': 'dark'}

    user._settings = "{not json"
    print(f"malformed={user.settings}")  # => malformed={}


if __name__ == "__main__":
    main()
