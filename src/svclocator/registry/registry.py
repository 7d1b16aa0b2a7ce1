"""Name -> instance store with the recorded priority (uses) relation."""

from __future__ import annotations

import logging
from typing import Any, Iterator

from svclocator.errors import DeleteError, LocateError

logger = logging.getLogger(__name__)

__all__ = ["ServiceRegistry"]


class ServiceRegistry:
    """Store of resolved service instances, owned by one Locator.

    The priority relation maps a service name to the names it declared as
    ``uses``. A name listed there may not be deleted until every service
    using it is gone.
    """

    def __init__(self) -> None:
        self._services: dict[str, Any] = {}
        self._priority: dict[str, list[str]] = {}

    # ----- Store -----

    def set(self, name: str, service: Any) -> None:
        """Register (or replace) a service instance."""
        self._services[name] = service
        logger.info("Loaded service '%s'", name)

    def get(self, name: str) -> Any:
        """Return the registered instance.

        Raises:
            LocateError: If no service is registered under ``name``.
        """
        try:
            return self._services[name]
        except KeyError:
            raise LocateError(service_name=name) from None

    def has(self, name: str) -> bool:
        return name in self._services

    def __contains__(self, name: object) -> bool:
        return name in self._services

    def __len__(self) -> int:
        return len(self._services)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._services))

    @property
    def names(self) -> list[str]:
        """Registered names in insertion order."""
        return list(self._services)

    def items(self) -> list[tuple[str, Any]]:
        """Snapshot of (name, service) pairs in insertion order."""
        return list(self._services.items())

    # ----- Priority relation -----

    def set_priority(self, name: str, uses: list[str]) -> None:
        """Record that ``name`` uses ``uses``. Empty lists are not recorded."""
        if uses:
            self._priority[name] = list(uses)

    @property
    def priority(self) -> dict[str, list[str]]:
        """Copy of the priority relation."""
        return {name: list(uses) for name, uses in self._priority.items()}

    def dependents_of(self, name: str) -> list[str]:
        """Names of the services that declared ``name`` in their uses."""
        return [dependent for dependent, uses in self._priority.items() if name in uses]

    def used_names(self) -> set[str]:
        """Every name that some recorded service still uses."""
        return {used for uses in self._priority.values() for used in uses}

    def release(self, name: str) -> None:
        """Drop the priority entry of ``name`` without removing the service."""
        self._priority.pop(name, None)

    # ----- Removal -----

    def delete(self, name: str) -> bool:
        """Remove a service and its priority entry.

        Returns False if the name was not registered.

        Raises:
            DeleteError: If another service lists ``name`` in its uses.
        """
        dependents = self.dependents_of(name)
        if dependents:
            raise DeleteError(service_name=name, used_by=dependents[0])

        self._priority.pop(name, None)
        if name not in self._services:
            return False
        del self._services[name]
        logger.info("Deleted service '%s'", name)
        return True

    def clear(self) -> None:
        """Forget every service and priority entry without destroying anything."""
        self._services.clear()
        self._priority.clear()
