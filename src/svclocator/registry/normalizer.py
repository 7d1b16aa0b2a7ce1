"""Service map and per-service configuration normalization."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from svclocator.errors import InvalidServiceConfigError, InvalidServiceMapError
from svclocator.registry.types import ServiceDeclaration

__all__ = ["normalize_service_map", "normalize_service_config", "ServiceConfig"]


class ServiceConfig(BaseModel):
    """Object form of a service entry: ``{"path": ..., "uses": [...]}``."""

    model_config = ConfigDict(extra="forbid")

    path: str | None = None
    uses: list[str] = []


def normalize_service_map(service_map: Any) -> dict[str, Any]:
    """Normalize a service map to a name -> service configuration mapping.

    A string becomes ``{service_map: True}`` and a list of strings becomes one
    ``{item: True}`` entry per item. Mappings are returned as a plain dict.

    Raises:
        InvalidServiceMapError: If the input is not a str, list/tuple of str, or mapping.
    """
    if isinstance(service_map, Mapping):
        return dict(service_map)

    if isinstance(service_map, str):
        return {service_map: True}

    if isinstance(service_map, (list, tuple)):
        normalized: dict[str, Any] = {}
        for item in service_map:
            if not isinstance(item, str):
                type_name = type(item).__name__
                raise InvalidServiceMapError(
                    type_name=f"{type(service_map).__name__}[{type_name}]",
                    cause=TypeError(f"Invalid service map item type '{type_name}'"),
                )
            normalized[item] = True
        return normalized

    type_name = type(service_map).__name__
    raise InvalidServiceMapError(
        type_name=type_name,
        cause=TypeError(f"Invalid service map type '{type_name}'"),
    )


def normalize_service_config(service_name: str, service_config: Any) -> ServiceDeclaration:
    """Normalize one service map entry to a ServiceDeclaration.

    Raises:
        InvalidServiceConfigError: If the entry has an unsupported type or shape.
    """
    if service_config is True:
        return ServiceDeclaration(name=service_name, path=service_name)

    if isinstance(service_config, str):
        return ServiceDeclaration(name=service_name, path=service_config)

    if isinstance(service_config, (list, tuple)):
        return ServiceDeclaration(name=service_name, path=service_name, uses=list(service_config))

    if isinstance(service_config, Mapping):
        try:
            parsed = ServiceConfig.model_validate(dict(service_config))
        except ValidationError as e:
            raise InvalidServiceConfigError(
                service_name=service_name,
                type_name=type(service_config).__name__,
                cause=e,
            ) from e
        return ServiceDeclaration(
            name=service_name,
            path=parsed.path if parsed.path is not None else service_name,
            uses=list(parsed.uses),
        )

    type_name = type(service_config).__name__
    raise InvalidServiceConfigError(
        service_name=service_name,
        type_name=type_name,
        cause=TypeError(f"Invalid service configuration type '{type_name}'"),
    )
