"""svclocator registry: declarations, wildcard expansion, resolution and teardown.

Usage::

    from svclocator.registry import ServiceRegistry, expand_service_map, resolve_batch

    declarations = await expand_service_map({"api/*": "./api/*.py"})
"""

from __future__ import annotations

from svclocator.registry.dependencies import MAX_ATTEMPTS, resolve_batch
from svclocator.registry.entry_point import (
    ModuleLoader,
    classify_export,
    resolve_export,
    resolve_service_path,
)
from svclocator.registry.lifecycle import destroy_services
from svclocator.registry.normalizer import normalize_service_config, normalize_service_map
from svclocator.registry.registry import ServiceRegistry
from svclocator.registry.scanner import (
    expand_service_map,
    expand_wildcards,
    is_service_dir,
    is_service_file,
    list_directory,
    normalize_service_path,
)
from svclocator.registry.types import DirEntry, ExportKind, ResolvedExport, ServiceDeclaration

__all__ = [
    "DirEntry",
    "ExportKind",
    "MAX_ATTEMPTS",
    "ModuleLoader",
    "ResolvedExport",
    "ServiceDeclaration",
    "ServiceRegistry",
    "classify_export",
    "destroy_services",
    "expand_service_map",
    "expand_wildcards",
    "is_service_dir",
    "is_service_file",
    "list_directory",
    "normalize_service_config",
    "normalize_service_map",
    "normalize_service_path",
    "resolve_batch",
    "resolve_export",
    "resolve_service_path",
]
