"""Dependency-ordered eager loading by iterative retry."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from svclocator.errors import EagerloadError, ServicePriorityError, ServiceUnresolvableError
from svclocator.registry.registry import ServiceRegistry
from svclocator.registry.types import ServiceDeclaration

logger = logging.getLogger(__name__)

__all__ = ["MAX_ATTEMPTS", "resolve_batch"]

# Upper bound on resolver passes, a guard against inputs that never settle.
MAX_ATTEMPTS = 1000

ResolveService = Callable[[ServiceDeclaration], Awaitable[None]]


async def resolve_batch(
    declarations: list[ServiceDeclaration],
    registry: ServiceRegistry,
    resolve_service: ResolveService,
    max_attempts: int = MAX_ATTEMPTS,
) -> None:
    """Resolve every declaration into the registry, honoring declared uses.

    Each pass tries the declarations that are not registered yet. A
    declaration whose uses are not all registered, or whose resolution
    fails, is queued for the next pass. ``resolve_service`` registers the
    instance; on success a non-empty uses list is recorded as priority.

    Raises:
        ServiceUnresolvableError: Immediately, when a path can never resolve.
        EagerloadError: When a pass makes no progress, or ``max_attempts``
            passes did not settle the batch.
    """
    pending = list(declarations)
    attempt = 1

    while True:
        queued: list[ServiceDeclaration] = []
        errors: list[BaseException] = []

        for declaration in pending:
            name = declaration.name
            if registry.has(name):
                continue

            missing = next((using for using in declaration.uses if not registry.has(using)), None)
            if missing is not None:
                logger.debug("Deferring service '%s' until '%s' is loaded (attempt %d)", name, missing, attempt)
                queued.append(declaration)
                errors.append(ServicePriorityError(service_name=name, using=missing))
                continue

            try:
                await resolve_service(declaration)
            except ServiceUnresolvableError:
                raise
            except Exception as e:
                logger.warning("Failed to load service '%s' attempt %d: %s", name, attempt, e)
                queued.append(declaration)
                errors.append(e)
                continue

            registry.set_priority(name, declaration.uses)

        if errors and len(errors) == len(pending):
            details = {"attempt": attempt, "services": [d.name for d in queued]}
            if all(isinstance(e, ServicePriorityError) for e in errors):
                cycle_path = _find_cycle(queued)
                if cycle_path is not None:
                    logger.error("Circular uses detected: %s", " -> ".join(cycle_path))
                    details["cycle_path"] = cycle_path
            raise EagerloadError(message="Could not resolve service map", causes=errors, details=details)

        if errors and attempt >= max_attempts:
            raise EagerloadError(
                message=f"Could not resolve service map after {attempt} attempts",
                causes=errors,
                details={"attempt": attempt, "services": [d.name for d in queued]},
            )

        if not queued:
            return

        pending = queued
        attempt += 1


def _find_cycle(declarations: list[ServiceDeclaration]) -> list[str] | None:
    """Find a cycle in the uses of the given declarations, if there is one.

    Depth-first over every in-batch edge; ``path`` is the current walk, so
    an edge back into it closes a cycle.
    """
    names = {d.name for d in declarations}
    dep_map: dict[str, list[str]] = {d.name: [u for u in d.uses if u in names] for d in declarations}
    done: set[str] = set()

    for start in dep_map:
        if start in done:
            continue
        path: list[str] = [start]
        on_path: set[str] = {start}
        stack: list[tuple[str, int]] = [(start, 0)]

        while stack:
            node, index = stack[-1]
            edges = dep_map[node]
            if index == len(edges):
                stack.pop()
                path.pop()
                on_path.discard(node)
                done.add(node)
                continue

            stack[-1] = (node, index + 1)
            nxt = edges[index]
            if nxt in on_path:
                return path[path.index(nxt) :] + [nxt]
            if nxt not in done:
                stack.append((nxt, 0))
                path.append(nxt)
                on_path.add(nxt)

    return None
