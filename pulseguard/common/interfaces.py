"""
Interfaces for the host application collaborators.
"""

from __future__ import annotations

from typing import Protocol


class IHostRuntime(Protocol):
    """What the subsystem needs from the host it is embedded in."""

    def runtime_version(self) -> int:
        """Version indicator reported by the host runtime."""
        ...

    def is_in_open_space(self) -> bool:
        """True while connectivity loss must not be tolerated."""
        ...


class ILivenessGate(Protocol):
    """Anything that can answer the per-frame liveness question."""

    def poll(self) -> bool: ...
