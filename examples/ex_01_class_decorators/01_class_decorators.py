"""Class decorators: version, log_class and singleton stacked on one class.

This module demonstrates:

1. ``@singleton`` returning the first instance for every later construction.
2. ``@version`` tagging instances and recording ``VERSION`` metadata.
3. Stacked decorators applying bottom-up, so the version tag sits innermost.
"""

from __future__ import annotations

from metawire import VERSION, log_class, metadata_store, singleton, version


@singleton
@log_class
@version("1.0")
class ApiService:
    def __init__(self, url: str) -> None:
        self.url = url

    def fetch(self) -> str:
        return f"Fetching data from {self.url}"


def main() -> None:
    api1 = ApiService("https://api.com")
    api2 = ApiService("https://other.com")

    print(f"same_instance={api1 is api2}")  # => same_instance=True
    print(api2.fetch())  # => Fetching data from https://api.com
    print(f"instance_version={api1.version}")  # => instance_version=1.0
    print(f"class_version={metadata_store.get(VERSION, ApiService)}")  # => class_version=1.0
    print(f"is_api_service={isinstance(api1, ApiService)}")  # => is_api_service=True


if __name__ == "__main__":
    main()
