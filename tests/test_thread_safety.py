"""Tests for thread safety of Container."""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed

from metawire.container import Container
from metawire.lock_mode import LockMode
from metawire.registration_decorators import Autowired, injectable


class TestConcurrentResolution:
    def test_concurrent_get_constructs_once(self, container: Container) -> None:
        """Concurrent resolution returns one instance built once."""
        constructed: list[object] = []
        barrier = threading.Barrier(10)

        @injectable()
        class ServiceA:
            def __init__(self) -> None:
                constructed.append(self)

        results: list[ServiceA] = []
        errors: list[Exception] = []

        def resolve_service() -> None:
            barrier.wait()
            try:
                results.append(container.get(ServiceA))
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=resolve_service) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert len(results) == 10
        assert all(r is results[0] for r in results)
        assert len(constructed) == 1

    def test_concurrent_autowired_graph_constructs_each_class_once(
        self,
        container: Container,
    ) -> None:
        """Concurrent resolution of a dependency chain builds every class once."""
        constructed: list[str] = []
        lock = threading.Lock()

        @injectable()
        class ServiceA:
            def __init__(self) -> None:
                with lock:
                    constructed.append("a")

        @injectable()
        class ServiceB:
            a = Autowired(ServiceA)

            def __init__(self) -> None:
                with lock:
                    constructed.append("b")

        with ThreadPoolExecutor(max_workers=8) as executor:
            futures = [
                executor.submit(container.get, ServiceB if i % 2 else ServiceA) for i in range(40)
            ]
            results = [future.result() for future in as_completed(futures)]

        assert sorted(constructed) == ["a", "b"]
        assert len({id(result) for result in results}) == 2
        assert container.get(ServiceB).a is container.get(ServiceA)


class TestUnlockedContainer:
    def test_single_threaded_resolution(self, container_unlocked: Container) -> None:
        """Unlocked containers still cache instances."""

        @injectable()
        class ServiceA:
            pass

        assert container_unlocked.get(ServiceA) is container_unlocked.get(ServiceA)

    def test_lock_mode_is_configurable(self) -> None:
        @injectable()
        class ServiceA:
            pass

        for lock_mode in LockMode:
            assert isinstance(Container(lock_mode=lock_mode).get(ServiceA), ServiceA)
