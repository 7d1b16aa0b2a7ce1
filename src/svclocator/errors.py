"""Error hierarchy for the svclocator service registry."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

__all__ = [
    "LocatorError",
    "ConfigNotFoundError",
    "ConfigError",
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
    "ErrorCodes",
]


class LocatorError(Exception):
    """Base error for all svclocator errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigNotFoundError(LocatorError):
    """Raised when a configuration file cannot be found."""

    def __init__(self, config_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_NOT_FOUND",
            message=f"Configuration file not found: {config_path}",
            details={"config_path": config_path},
            **kwargs,
        )


class ConfigError(LocatorError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="CONFIG_INVALID", message=message, **kwargs)


class InvalidServiceMapError(LocatorError):
    """Raised when a service map is not a string, a list of strings or a mapping."""

    def __init__(self, type_name: str, **kwargs: Any) -> None:
        super().__init__(
            code="LOCATOR_INVALID_SERVICE_MAP",
            message=(
                "Service map must be a mapping, or a string or list of strings "
                f"that can be normalized to a mapping, got '{type_name}'"
            ),
            details={"type": type_name},
            **kwargs,
        )


class InvalidServiceConfigError(LocatorError):
    """Raised when the configuration of a single service entry is malformed."""

    def __init__(self, service_name: str, type_name: str, **kwargs: Any) -> None:
        super().__init__(
            code="LOCATOR_INVALID_SERVICE_CONFIG",
            message=f"Invalid service configuration for '{service_name}' of type '{type_name}'",
            details={"service_name": service_name, "type": type_name},
            **kwargs,
        )

    @property
    def service_name(self) -> str:
        return self.details["service_name"]


class InvalidPathError(LocatorError):
    """Raised when a service path cannot be expanded or read."""

    def __init__(self, path: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="LOCATOR_INVALID_PATH",
            message=f"Invalid service path '{path}': {reason}",
            details={"path": path, "reason": reason},
            **kwargs,
        )

    @property
    def path(self) -> str:
        return self.details["path"]

    @property
    def reason(self) -> str:
        return self.details["reason"]


class ResolvePathError(LocatorError):
    """Raised when a service path points at nothing that can be loaded."""

    def __init__(self, path: str, **kwargs: Any) -> None:
        super().__init__(
            code="LOCATOR_RESOLVE_PATH",
            message=f"Could not resolve path '{path}' to a file, directory or module",
            details={"path": path},
            **kwargs,
        )


class ModuleLoadError(LocatorError):
    """Raised when a service module file cannot be imported."""

    def __init__(self, path: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="LOCATOR_MODULE_LOAD",
            message=f"Failed to load module '{path}': {reason}",
            details={"path": path, "reason": reason},
            **kwargs,
        )


class ServiceUnresolvableError(LocatorError):
    """Raised when a resolvable-looking path yielded no service instance."""

    def __init__(self, service_name: str, path: str, **kwargs: Any) -> None:
        super().__init__(
            code="LOCATOR_SERVICE_UNRESOLVABLE",
            message=f"Could not resolve service '{service_name}', path '{path}' is unresolvable",
            details={"service_name": service_name, "path": path},
            **kwargs,
        )

    @property
    def service_name(self) -> str:
        return self.details["service_name"]


class ServicePriorityError(LocatorError):
    """Raised when a service uses another service that has not been loaded yet."""

    def __init__(self, service_name: str, using: str, **kwargs: Any) -> None:
        super().__init__(
            code="LOCATOR_SERVICE_PRIORITY",
            message=f"Service '{service_name}' is using '{using}' which has not yet been loaded",
            details={"service_name": service_name, "using": using},
            **kwargs,
        )


class UnknownLocatorError(LocatorError):
    """Raised when a loaded module exposes nothing recognizable as a service or locator."""

    def __init__(self, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="LOCATOR_UNKNOWN_LOCATOR",
            message=f"Could not resolve locator from loaded module: {reason}",
            details={"reason": reason},
            **kwargs,
        )


class LocateError(LocatorError):
    """Raised when locating a service that has not been loaded."""

    def __init__(self, service_name: str, **kwargs: Any) -> None:
        super().__init__(
            code="LOCATOR_LOCATE",
            message=f"Service '{service_name}' has not been loaded",
            details={"service_name": service_name},
            **kwargs,
        )

    @property
    def service_name(self) -> str:
        return self.details["service_name"]


class LazyloadError(LocatorError):
    """Raised when a single service could not be lazy loaded."""

    def __init__(self, service_name: str, **kwargs: Any) -> None:
        super().__init__(
            code="LOCATOR_LAZYLOAD",
            message=f"Could not lazyload service '{service_name}'",
            details={"service_name": service_name},
            **kwargs,
        )


class EagerloadError(LocatorError):
    """Raised when a service map could not be resolved.

    ``causes`` holds one error per declaration that failed in the last pass.
    """

    def __init__(self, message: str, causes: list[BaseException], **kwargs: Any) -> None:
        super().__init__(code="LOCATOR_EAGERLOAD", message=message, **kwargs)
        self.causes = list(causes)


class DeleteError(LocatorError):
    """Raised when deleting a service that another service uses."""

    def __init__(self, service_name: str, used_by: str, **kwargs: Any) -> None:
        super().__init__(
            code="LOCATOR_DELETE",
            message=f"Cannot delete prioritized service '{service_name}', it is used by '{used_by}'",
            details={"service_name": service_name, "used_by": used_by},
            **kwargs,
        )


class DestroyServiceError(LocatorError):
    """Raised when the destroy operation of one service failed."""

    def __init__(self, service_name: str, **kwargs: Any) -> None:
        super().__init__(
            code="LOCATOR_DESTROY_SERVICE",
            message=f"Failed to destroy service '{service_name}'",
            details={"service_name": service_name},
            **kwargs,
        )

    @property
    def service_name(self) -> str:
        return self.details["service_name"]


class DestroyError(LocatorError):
    """Raised after teardown when one or more services failed to destroy."""

    def __init__(self, causes: list[DestroyServiceError], **kwargs: Any) -> None:
        super().__init__(
            code="LOCATOR_DESTROY",
            message=f"Destroy for {len(causes)} services was rejected",
            details={"services": [c.service_name for c in causes]},
            **kwargs,
        )
        self.causes = list(causes)


class ErrorCodes:
    """All svclocator error codes as constants.

    Example:
        if error.code == ErrorCodes.LOCATOR_LOCATE:
            await locator.lazyload(name)
    """

    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    LOCATOR_INVALID_SERVICE_MAP = "LOCATOR_INVALID_SERVICE_MAP"
    LOCATOR_INVALID_SERVICE_CONFIG = "LOCATOR_INVALID_SERVICE_CONFIG"
    LOCATOR_INVALID_PATH = "LOCATOR_INVALID_PATH"
    LOCATOR_RESOLVE_PATH = "LOCATOR_RESOLVE_PATH"
    LOCATOR_MODULE_LOAD = "LOCATOR_MODULE_LOAD"
    LOCATOR_SERVICE_UNRESOLVABLE = "LOCATOR_SERVICE_UNRESOLVABLE"
    LOCATOR_SERVICE_PRIORITY = "LOCATOR_SERVICE_PRIORITY"
    LOCATOR_UNKNOWN_LOCATOR = "LOCATOR_UNKNOWN_LOCATOR"
    LOCATOR_LOCATE = "LOCATOR_LOCATE"
    LOCATOR_LAZYLOAD = "LOCATOR_LAZYLOAD"
    LOCATOR_EAGERLOAD = "LOCATOR_EAGERLOAD"
    LOCATOR_DELETE = "LOCATOR_DELETE"
    LOCATOR_DESTROY_SERVICE = "LOCATOR_DESTROY_SERVICE"
    LOCATOR_DESTROY = "LOCATOR_DESTROY"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
