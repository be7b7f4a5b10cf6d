from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """Select locking behavior for shared mutable state.

    Use these values for the container ``lock_mode`` and for the ``caching``
    decorator. Single-threaded programs may pick ``NONE`` to skip lock
    acquisition on hot paths.
    """

    THREAD = "thread"
    """Guard shared state with ``threading`` locks."""

    NONE = "none"
    """Disable locking around shared state."""
