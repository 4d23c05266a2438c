"""Docker Hub repository to internal service name lookup.

The mapping doubles as the allow-list of repositories the bridge accepts.
It is built from configuration and handed to the request pipeline through
a FastAPI dependency, so tests can substitute their own mapping.
"""

from collections.abc import Mapping
from types import MappingProxyType

from app.errors import UnknownRepository


class ServiceMap:
    """Read-only mapping of ``namespace/name`` repositories to service names."""

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping = MappingProxyType(dict(mapping))

    def __contains__(self, repo_name: object) -> bool:
        return repo_name in self._mapping

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self) -> str:
        return f"ServiceMap({dict(self._mapping)!r})"

    def map_to_service(self, repo_name: str) -> str:
        """Return the service name for *repo_name*.

        Raises:
            UnknownRepository: If *repo_name* is not in the mapping.
        """
        if repo_name not in self._mapping:
            raise UnknownRepository(repo_name, self.supported_repositories())
        return self._mapping[repo_name]

    def is_supported(self, repo_name: object) -> bool:
        return isinstance(repo_name, str) and repo_name in self._mapping

    def supported_repositories(self) -> list[str]:
        return list(self._mapping)

    def mapped_services(self) -> list[str]:
        return list(self._mapping.values())

    def as_dict(self) -> dict[str, str]:
        """Return a mutable copy of the mapping."""
        return dict(self._mapping)
