"""Route group / router mount registry for one discoverer run."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass
class RouteGroup:
    file_path: str
    variable_name: str
    prefix: str = ""
    middlewares: list[str] = field(default_factory=list)


@dataclass
class RouterMount:
    prefix: str
    router_name: str


class RouteGroupRegistry:
    """Index of router mounts and middleware groups keyed by (file, identifier).

    Filled by a first pass over every file of a run and read during the second
    pass; nothing is cleared per file.
    """

    def __init__(self) -> None:
        self._groups: dict[tuple[str, str], list[RouteGroup]] = {}
        self._mounts: dict[tuple[str, str], list[RouterMount]] = {}

    def register_group(
        self,
        file_path: str,
        variable_name: str,
        prefix: str = "",
        middlewares: Sequence[str] = (),
    ) -> None:
        group = RouteGroup(file_path, variable_name, prefix, list(middlewares))
        self._groups.setdefault((file_path, variable_name), []).append(group)

    def register_router_mount(
        self,
        file_path: str,
        app_name: str,
        prefix: str,
        router_name: str,
    ) -> None:
        self._mounts.setdefault((file_path, app_name), []).append(RouterMount(prefix, router_name))

    def get_group(self, file_path: str, variable_name: str) -> RouteGroup | None:
        """Most recent registration for the key wins."""
        groups = self._groups.get((file_path, variable_name))
        return groups[-1] if groups else None

    def get_router_prefix(self, file_path: str, router_name: str) -> str:
        """Mount prefix for ``router_name``.

        Searches the mounts of every file, not just ``file_path``: a router
        mounted in app.ts resolves for routes declared in routes/users.ts as
        long as both use the same identifier.
        """
        for mounts in self._mounts.values():
            for mount in mounts:
                if mount.router_name == router_name:
                    return mount.prefix
        return ""

    def get_all_middlewares(self, file_path: str, variable_name: str) -> list[str]:
        group = self.get_group(file_path, variable_name)
        return list(group.middlewares) if group else []

    def known_identifiers(self) -> set[str]:
        """Every app and router identifier seen in a mount."""
        names: set[str] = set()
        for (_, app_name), mounts in self._mounts.items():
            names.add(app_name)
            names.update(m.router_name for m in mounts)
        return names

    def clear(self) -> None:
        self._groups.clear()
        self._mounts.clear()
