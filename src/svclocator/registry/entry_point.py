"""Module loading and classification of loaded module surfaces."""

from __future__ import annotations

import hashlib
import importlib
import importlib.util
import inspect
import os
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any

from svclocator.errors import ModuleLoadError, UnknownLocatorError
from svclocator.registry.types import ExportKind, ResolvedExport

if TYPE_CHECKING:
    from svclocator.paths import PathResolver

__all__ = [
    "DIRECTORY_ENTRY_POINTS",
    "ModuleLoader",
    "classify_export",
    "resolve_export",
    "resolve_service_path",
]

# Tried in order when a service path is a directory.
DIRECTORY_ENTRY_POINTS = ("locator.py", "__init__.py")


def _has_direct_locate(obj: Any) -> bool:
    """True when ``obj.locate(access)`` can be called without instantiating anything."""
    if inspect.isclass(obj):
        attr = inspect.getattr_static(obj, "locate", None)
        return isinstance(attr, (staticmethod, classmethod))
    locate = getattr(obj, "locate", None)
    return callable(locate) and not inspect.isclass(locate)


def _module_name_for(resolved: Path) -> str:
    """Unique ``sys.modules`` key for a file; the hash separates ``a-b.py`` from ``a_b.py``."""
    readable = re.sub(r"\W", "_", resolved.stem)
    digest = hashlib.sha1(str(resolved).encode("utf-8")).hexdigest()[:12]
    return f"svclocator_ext_{readable}_{digest}"


def _takes_no_arguments(cls: type) -> bool:
    try:
        sig = inspect.signature(cls)
    except (TypeError, ValueError):
        return False
    for param in sig.parameters.values():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        if param.default is param.empty:
            return False
    return True


def classify_export(surface: Any) -> ResolvedExport:
    """Decide how a loaded module surface produces its service.

    Checked in order: a module-level ``locate`` function, a ``Locator``
    object or class, and a ``default`` value (which may itself expose
    ``locate``).

    Raises:
        UnknownLocatorError: If nothing recognizable is exported.
    """
    locate = getattr(surface, "locate", None)
    if callable(locate):
        if inspect.isclass(locate):
            raise UnknownLocatorError(
                reason="exported 'locate' is expected to be a callable function, not a class",
            )
        return ResolvedExport(kind=ExportKind.CALLABLE_LOCATOR, target=locate)

    locator = getattr(surface, "Locator", None)
    if locator is not None:
        if _has_direct_locate(locator):
            return ResolvedExport(kind=ExportKind.INSTANCE_LOCATOR, target=locator)
        if inspect.isclass(locator) and callable(getattr(locator, "locate", None)) and _takes_no_arguments(locator):
            return ResolvedExport(kind=ExportKind.CLASS_LOCATOR, target=locator)
        raise UnknownLocatorError(reason="exported 'Locator' is expected to have a 'locate' method")

    default = getattr(surface, "default", None)
    if default is not None:
        if _has_direct_locate(default):
            return ResolvedExport(kind=ExportKind.INSTANCE_LOCATOR, target=default)
        return ResolvedExport(kind=ExportKind.PLAIN_VALUE, target=default)

    raise UnknownLocatorError(reason="no 'locate', 'Locator' or 'default' export found")


async def resolve_export(export: ResolvedExport, access: Any) -> Any:
    """Produce the service instance of a classified export.

    Locators are called with ``access``, the registry lookup they use to
    locate the services they depend on. Awaitable results are awaited.
    """
    if export.kind is ExportKind.PLAIN_VALUE:
        return export.target

    if export.kind is ExportKind.CALLABLE_LOCATOR:
        result = export.target(access)
    elif export.kind is ExportKind.CLASS_LOCATOR:
        result = export.target().locate(access)
    else:
        result = export.target.locate(access)

    if inspect.isawaitable(result):
        result = await result
    return result


class ModuleLoader:
    """Imports service modules, caching them by absolute file path."""

    def __init__(self) -> None:
        self._cache: dict[str, ModuleType] = {}

    def load_file(self, file_path: str | os.PathLike[str]) -> ModuleType:
        """Import a Python file and return the loaded module object.

        Raises:
            ModuleLoadError: If the file cannot be imported.
        """
        resolved = Path(file_path).resolve()
        key = str(resolved)
        if key in self._cache:
            return self._cache[key]

        module_name = _module_name_for(resolved)
        search_locations = [str(resolved.parent)] if resolved.name == "__init__.py" else None
        spec = importlib.util.spec_from_file_location(
            module_name,
            key,
            submodule_search_locations=search_locations,
        )
        if spec is None or spec.loader is None:
            raise ModuleLoadError(path=key, reason=f"Cannot create import spec for {key}")

        mod = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = mod
        try:
            spec.loader.exec_module(mod)
        except Exception as exc:
            sys.modules.pop(module_name, None)
            raise ModuleLoadError(path=key, reason=f"Failed to import module: {exc}", cause=exc) from exc

        self._cache[key] = mod
        return mod

    def load_directory(self, dir_path: str | os.PathLike[str]) -> ModuleType | None:
        """Import the entry point file of a directory, or return None if it has none."""
        for filename in DIRECTORY_ENTRY_POINTS:
            candidate = os.path.join(dir_path, filename)
            if os.path.isfile(candidate):
                return self.load_file(candidate)
        return None

    def load_module(self, module_name: str) -> ModuleType:
        """Import an installed module by its dotted name.

        Raises:
            ModuleLoadError: If the import fails.
        """
        try:
            return importlib.import_module(module_name)
        except Exception as exc:
            raise ModuleLoadError(path=module_name, reason=f"Failed to import module: {exc}", cause=exc) from exc


async def resolve_service_path(
    path: str,
    path_resolver: PathResolver,
    loader: ModuleLoader,
    access: Any,
) -> Any:
    """Load whatever ``path`` points at and resolve it to a service instance.

    Returns None when the path is a directory without an entry point file.
    """

    async def _resolve(surface: ModuleType | None) -> Any:
        if surface is None:
            return None
        return await resolve_export(classify_export(surface), access)

    async def on_file(file_path: str) -> Any:
        return await _resolve(loader.load_file(file_path))

    async def on_directory(dir_path: str) -> Any:
        return await _resolve(loader.load_directory(dir_path))

    async def on_module(module_name: str) -> Any:
        return await _resolve(loader.load_module(module_name))

    return await path_resolver.resolve(path, on_file, on_directory, on_module)
