"""Coordinated teardown of registered services."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import TYPE_CHECKING, Any, Callable

from svclocator.errors import DestroyError, DestroyServiceError
from svclocator.registry.registry import ServiceRegistry

if TYPE_CHECKING:
    from svclocator.config import Config

logger = logging.getLogger(__name__)

__all__ = ["destroy_services"]


async def _destroy_one(
    registry: ServiceRegistry,
    name: str,
    destroy: Callable[[], Any],
) -> tuple[str, Exception | None]:
    try:
        result = destroy()
        if inspect.isawaitable(result):
            await result
        logger.info("Destroyed service '%s'", name)
        return name, None
    except Exception as e:
        logger.warning("Failed to destroy service '%s': %s", name, e)
        return name, e
    finally:
        registry.delete(name)


async def destroy_services(registry: ServiceRegistry, config: Config | None = None) -> None:
    """Destroy and remove every registered service.

    Works in rounds. A round only touches services no other registered
    service uses, so a service is always destroyed in the same round as, or
    after, the services using it. Destroy calls within a round run
    concurrently. ``destroy.<name>: false`` in the config removes the
    service without calling its destroy.

    Raises:
        DestroyError: After the registry is drained, if any destroy failed.
    """
    rejected: list[DestroyServiceError] = []

    while len(registry):
        used = registry.used_names()
        candidates = [(name, service) for name, service in registry.items() if name not in used]

        if not candidates:
            # Only reachable when the remaining services use each other.
            remaining = registry.names
            logger.warning("Circular uses between %s, releasing their priority", ", ".join(remaining))
            for name in remaining:
                registry.release(name)
            continue

        pending = []
        for name, service in candidates:
            enabled = config.find_bool(("destroy", name), True) if config is not None else True
            if not enabled:
                logger.warning("Destroy disabled for service '%s'", name)
                registry.delete(name)
                continue

            destroy = getattr(service, "destroy", None)
            if callable(destroy):
                pending.append(_destroy_one(registry, name, destroy))
            else:
                registry.delete(name)

        for name, error in await asyncio.gather(*pending):
            if error is not None:
                rejected.append(DestroyServiceError(service_name=name, cause=error))

    if rejected:
        raise DestroyError(causes=rejected)
