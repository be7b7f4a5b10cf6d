"""Method decorators: caching shared across instances and async retry.

This module demonstrates:

1. ``@caching`` running the body once per distinct argument list, for every
   instance of the class.
2. ``@retry`` re-running a failing coroutine until it succeeds.
3. ``@measure_time`` stacked over ``@caching``.
"""

from __future__ import annotations

import asyncio
import logging
import math

from metawire import caching, measure_time, retry


class DataProcessor:
    body_calls = 0
    fetch_calls = 0

    @measure_time
    @caching
    def complex_calc(self, value: int) -> float:
        DataProcessor.body_calls += 1
        return sum(math.sin(value * count) for count in range(1000))

    @retry(3, delay=10)
    async def fetch_data(self, url: str) -> dict[str, str]:
        DataProcessor.fetch_calls += 1
        if DataProcessor.fetch_calls < 3:
            msg = f"Failed to fetch data from {url}"
            raise ConnectionError(msg)
        return {"url": url}


def main() -> None:
    # retry logs each failed attempt at WARNING
    logging.getLogger("metawire").setLevel(logging.ERROR)

    first = DataProcessor().complex_calc(5)
    second = DataProcessor().complex_calc(5)
    DataProcessor().complex_calc(6)

    print(f"cached_result_equal={first == second}")  # => cached_result_equal=True
    print(f"body_calls={DataProcessor.body_calls}")  # => body_calls=2

    data = asyncio.run(DataProcessor().fetch_data("https://example.com"))
    print(f"fetched={data['url']}")  # => fetched=https://example.com
    print(f"fetch_calls={DataProcessor.fetch_calls}")  # => fetch_calls=3


if __name__ == "__main__":
    main()
