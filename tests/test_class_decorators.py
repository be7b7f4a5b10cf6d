"""Tests for version, log_class and singleton."""

import logging
import threading

import pytest

from metawire.class_decorators import log_class, singleton, version
from metawire.metadata import VERSION, metadata_store

CLASS_LOGGER = "metawire.class_decorators"


class TestVersion:
    def test_records_metadata_and_tags_instances(self) -> None:
        @version("1.0")
        class Service:
            def __init__(self, url: str) -> None:
                self.url = url

        service = Service("https://api.example")

        assert service.version == "1.0"
        assert service.url == "https://api.example"
        assert metadata_store.get(VERSION, Service) == "1.0"

    def test_preserves_class_identity_attributes(self) -> None:
        class Original:
            """Original docstring."""

            def fetch(self) -> str:
                return "data"

        tagged = version("2.0")(Original)

        assert tagged is not Original
        assert issubclass(tagged, Original)
        assert tagged.__name__ == "Original"
        assert tagged.__qualname__ == Original.__qualname__
        assert tagged.__doc__ == "Original docstring."
        assert tagged.__wrapped__ is Original
        assert tagged().fetch() == "data"

    def test_version_is_set_after_original_init(self) -> None:
        @version("1.0")
        class Service:
            def __init__(self) -> None:
                self.version = "overwritten by decorator"

        assert Service().version == "1.0"


class TestLogClass:
    def test_logs_at_definition_and_on_every_construction(
        self,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        caplog.set_level(logging.INFO, logger=CLASS_LOGGER)

        @log_class
        class Service:
            pass

        Service()
        Service()

        messages = [record.getMessage() for record in caplog.records]
        assert messages == ["Creating: Service"] * 3

    def test_construction_arguments_pass_through(self) -> None:
        @log_class
        class Service:
            def __init__(self, url: str, *, retries: int = 0) -> None:
                self.url = url
                self.retries = retries

        service = Service("https://api.example", retries=2)

        assert isinstance(service, Service)
        assert (service.url, service.retries) == ("https://api.example", 2)


class TestSingleton:
    def test_second_construction_returns_first_instance(self) -> None:
        @singleton
        class Service:
            def __init__(self, url: str) -> None:
                self.url = url

        first = Service("https://one.example")
        second = Service("https://two.example")

        assert first is second
        assert second.url == "https://one.example"

    def test_init_runs_once(self) -> None:
        calls: list[str] = []

        @singleton
        class Service:
            def __init__(self, name: str) -> None:
                calls.append(name)

        Service("a")
        Service("b")

        assert calls == ["a"]

    def test_methods_and_isinstance_are_unaffected(self) -> None:
        class Raw:
            def ping(self) -> str:
                return "pong"

        wrapped = singleton(Raw)
        instance = wrapped()

        assert isinstance(instance, wrapped)
        assert isinstance(instance, Raw)
        assert instance.ping() == "pong"

    def test_subclasses_construct_normally(self) -> None:
        @singleton
        class Base:
            pass

        class Child(Base):
            pass

        assert Child() is not Child()
        assert Base() is Base()

    def test_keeps_custom_metaclass(self) -> None:
        class Meta(type):
            created = 0

            def __call__(cls, *args: object, **kwargs: object) -> object:
                Meta.created += 1
                return super().__call__(*args, **kwargs)

        class Raw(metaclass=Meta):
            pass

        wrapped = singleton(Raw)
        wrapped()
        wrapped()

        assert isinstance(wrapped, Meta)
        assert Meta.created == 1

    def test_concurrent_construction_builds_one_instance(self) -> None:
        constructed: list[object] = []
        barrier = threading.Barrier(8)

        @singleton
        class Service:
            def __init__(self) -> None:
                constructed.append(self)

        results: list[object] = []

        def build() -> None:
            barrier.wait()
            results.append(Service())

        threads = [threading.Thread(target=build) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(constructed) == 1
        assert all(result is results[0] for result in results)


class TestStackedClassDecorators:
    def test_singleton_log_class_version_composition(
        self,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        caplog.set_level(logging.INFO, logger=CLASS_LOGGER)

        @singleton
        @log_class
        @version("1.0")
        class ApiService:
            def __init__(self, url: str) -> None:
                self.url = url

        api1 = ApiService("https://api.com")
        api2 = ApiService("https://other.com")

        assert api1 is api2
        assert api1.version == "1.0"
        assert api1.url == "https://api.com"
        assert metadata_store.get(VERSION, ApiService) == "1.0"
        # one log at definition, one for the single real construction
        assert [record.getMessage() for record in caplog.records] == ["Creating: ApiService"] * 2

    def test_innermost_decorator_is_applied_first(self) -> None:
        @singleton
        @log_class
        @version("1.0")
        class ApiService:
            pass

        logged = ApiService.__wrapped__
        versioned = logged.__wrapped__
        raw = versioned.__wrapped__

        assert metadata_store.get_own(VERSION, raw) == "1.0"
        assert issubclass(ApiService, logged)
        assert issubclass(logged, versioned)
        assert issubclass(versioned, raw)
