"""Fork registries: where the chosen fork's full name is kept."""

from __future__ import annotations

from pathlib import Path

from open_authoring import store


class FileForkRegistry:
    """Fork registry backed by the local state file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path

    def get_fork_name(self) -> str | None:
        return store.get_fork_name(self.path)

    def set_fork_name(self, name: str | None) -> None:
        store.set_fork_name(name, self.path)


class MemoryForkRegistry:
    """In-process fork registry."""

    def __init__(self, initial: str | None = None) -> None:
        self._name: str | None = None
        self.set_fork_name(initial)

    def get_fork_name(self) -> str | None:
        return self._name

    def set_fork_name(self, name: str | None) -> None:
        self._name = (name or "").strip() or None
