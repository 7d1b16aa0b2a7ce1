"""ServiceLocator: the caller-facing service registry."""

from __future__ import annotations

import logging
import os
from typing import Any, Iterator

from svclocator.config import Config
from svclocator.errors import LazyloadError, ServiceUnresolvableError
from svclocator.paths import PathResolver
from svclocator.registry.dependencies import MAX_ATTEMPTS, resolve_batch
from svclocator.registry.entry_point import ModuleLoader, resolve_service_path
from svclocator.registry.lifecycle import destroy_services
from svclocator.registry.registry import ServiceRegistry
from svclocator.registry.scanner import expand_service_map
from svclocator.registry.types import ServiceDeclaration

logger = logging.getLogger(__name__)

__all__ = ["ServiceLocator"]


class ServiceLocator:
    """Resolves named services from Python modules and owns their lifecycle.

    The locator itself is what service locators receive: calling it with a
    name is the same as ``locate(name)``.

    Usage::

        locator = ServiceLocator(base_path="/srv/app")
        await locator.eagerload({"mailer": "./services/mailer.py", "api/*": "./api/*.py"})
        mailer = locator("mailer")
        await locator.destroy()
    """

    def __init__(
        self,
        config: Config | None = None,
        base_path: str | os.PathLike[str] | None = None,
        max_attempts: int = MAX_ATTEMPTS,
    ) -> None:
        """Initialize the ServiceLocator.

        Args:
            config: Config consulted for ``locator.<name>`` path overrides and
                ``destroy.<name>`` flags. An empty Config is used if omitted.
            base_path: Directory relative service paths resolve against.
                Defaults to the current working directory.
            max_attempts: Upper bound on eager load resolver passes.
        """
        self.config = config if config is not None else Config()
        self.path_resolver = PathResolver(base_path)
        self._loader = ModuleLoader()
        self._registry = ServiceRegistry()
        self._max_attempts = max_attempts

    # ----- Lookup -----

    def locate(self, name: str) -> Any:
        """Return a loaded service.

        Raises:
            LocateError: If the service has not been loaded.
        """
        return self._registry.get(name)

    def __call__(self, name: str) -> Any:
        return self.locate(name)

    def has(self, name: str) -> bool:
        return self._registry.has(name)

    def get(self, name: str, default: Any = None) -> Any:
        """Return a loaded service, or ``default`` if it has not been loaded."""
        if not self._registry.has(name):
            return default
        return self._registry.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._registry

    def __len__(self) -> int:
        return len(self._registry)

    def __iter__(self) -> Iterator[str]:
        return iter(self._registry)

    @property
    def names(self) -> list[str]:
        return self._registry.names

    @property
    def priority(self) -> dict[str, list[str]]:
        """Recorded uses of every service that declared any."""
        return self._registry.priority

    # ----- Registration -----

    def set(self, name: str, service: Any) -> None:
        """Register an already built service instance under ``name``."""
        self._registry.set(name, service)

    def delete(self, name: str) -> bool:
        """Remove a service without destroying it.

        Returns False if the service was not loaded.

        Raises:
            DeleteError: If another loaded service uses it.
        """
        return self._registry.delete(name)

    def clear(self) -> None:
        """Forget every service without destroying any of them."""
        self._registry.clear()

    # ----- Loading -----

    async def _resolve_service(self, declaration: ServiceDeclaration) -> None:
        service = await resolve_service_path(declaration.path, self.path_resolver, self._loader, self)
        if service is None:
            raise ServiceUnresolvableError(service_name=declaration.name, path=declaration.path)
        self._registry.set(declaration.name, service)

    async def lazyload(self, name: str, path: str | None = None) -> Any:
        """Return a service, loading it from ``path`` (default: ``name``) if needed.

        Raises:
            LazyloadError: If the service could not be loaded.
        """
        if not self._registry.has(name):
            declaration = ServiceDeclaration(name=name, path=path if path is not None else name)
            try:
                await self._resolve_service(declaration)
            except Exception as e:
                raise LazyloadError(service_name=name, cause=e) from e
        return self._registry.get(name)

    async def eagerload(self, service_map: Any) -> None:
        """Load every service of a service map.

        ``service_map`` is a path, a list of paths, or a mapping of service
        name to a path, a list of used service names, ``True``, or
        ``{"path": ..., "uses": [...]}``. Names and paths may contain ``*``
        wildcards.

        Raises:
            InvalidServiceMapError: If the service map has an unsupported type.
            InvalidServiceConfigError: If a service entry is malformed.
            InvalidPathError: If a wildcard entry cannot be expanded.
            ServiceUnresolvableError: If a path can never yield a service.
            EagerloadError: If the service map could not be resolved.
        """
        declarations = await expand_service_map(service_map, self.config, self.path_resolver.base_path)
        await resolve_batch(declarations, self._registry, self._resolve_service, self._max_attempts)

    # ----- Teardown -----

    async def destroy(self) -> None:
        """Destroy every loaded service, dependents before their dependencies.

        Raises:
            DestroyError: After every service was removed, if any destroy failed.
        """
        await destroy_services(self._registry, self.config)
