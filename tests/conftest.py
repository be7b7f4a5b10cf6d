"""Shared pytest fixtures for metawire tests."""

import pytest

from metawire.container import Container
from metawire.lock_mode import LockMode
from metawire.metadata import MetadataStore


@pytest.fixture()
def container() -> Container:
    """Empty container reading the process-wide metadata store."""
    return Container()


@pytest.fixture()
def container_unlocked() -> Container:
    """Container for single-threaded use."""
    return Container(lock_mode=LockMode.NONE)


@pytest.fixture()
def store() -> MetadataStore:
    """Isolated metadata store."""
    return MetadataStore()
