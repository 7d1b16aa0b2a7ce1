"""svclocator - Runtime service registry resolving named services from Python modules."""

from __future__ import annotations

# Core
from svclocator.locator import ServiceLocator
from svclocator.paths import PathResolver
from svclocator.registry import ServiceDeclaration, ServiceRegistry

# Config
from svclocator.config import Config

# Errors
from svclocator.errors import (
    ConfigError,
    ConfigNotFoundError,
    DeleteError,
    DestroyError,
    DestroyServiceError,
    EagerloadError,
    ErrorCodes,
    InvalidPathError,
    InvalidServiceConfigError,
    InvalidServiceMapError,
    LazyloadError,
    LocateError,
    LocatorError,
    ModuleLoadError,
    ResolvePathError,
    ServicePriorityError,
    ServiceUnresolvableError,
    UnknownLocatorError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "ServiceLocator",
    "ServiceRegistry",
    "ServiceDeclaration",
    "PathResolver",
    # Config
    "Config",
    # Errors
    "ErrorCodes",
    "LocatorError",
    "ConfigError",
    "ConfigNotFoundError",
    "InvalidServiceMapError",
    "InvalidServiceConfigError",
    "InvalidPathError",
    "ResolvePathError",
    "ModuleLoadError",
    "ServiceUnresolvableError",
    "ServicePriorityError",
    "UnknownLocatorError",
    "LocateError",
    "LazyloadError",
    "EagerloadError",
    "DeleteError",
    "DestroyServiceError",
    "DestroyError",
]
