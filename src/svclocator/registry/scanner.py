"""Wildcard expansion of service declarations against the filesystem."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import TYPE_CHECKING, Any

from svclocator.errors import InvalidPathError
from svclocator.registry.normalizer import normalize_service_config, normalize_service_map
from svclocator.registry.types import DirEntry, ServiceDeclaration

if TYPE_CHECKING:
    from svclocator.config import Config

logger = logging.getLogger(__name__)

__all__ = [
    "WILDCARD",
    "expand_service_map",
    "expand_wildcards",
    "is_service_dir",
    "is_service_file",
    "list_directory",
    "normalize_service_path",
]

WILDCARD = "*"

SERVICE_FILE_SUFFIXES = (".py",)
_NON_PRODUCTION_MARKERS = ("test", "tests", "spec", "unit", "int", "e2e", "example", "demo")
_SKIP_FILE_NAMES = {"conftest.py", "setup.py"}
_SKIP_DIR_NAMES = {"__pycache__", "node_modules"}


def is_service_file(filename: str, expected_suffix: str = "") -> bool:
    """Decide whether a file found by a wildcard may be loaded as a service.

    With an ``expected_suffix`` the filename must end with it, otherwise it
    must carry a recognized source suffix. Private files and test/spec/example
    style files are never services.
    """
    if filename.startswith((".", "_")) or filename in _SKIP_FILE_NAMES:
        return False

    if expected_suffix:
        if not filename.endswith(expected_suffix):
            return False
    elif not filename.endswith(SERVICE_FILE_SUFFIXES):
        return False

    for suffix in SERVICE_FILE_SUFFIXES:
        if not filename.endswith(suffix):
            continue
        stem = filename[: -len(suffix)]
        if stem.startswith("test_"):
            return False
        for marker in _NON_PRODUCTION_MARKERS:
            if stem.endswith(f".{marker}") or stem.endswith(f"_{marker}"):
                return False

    return True


def is_service_dir(dirname: str) -> bool:
    """Decide whether a wildcard may descend into a directory."""
    if dirname.startswith((".", "_")):
        return False
    return dirname not in _SKIP_DIR_NAMES


def list_directory(path: str) -> list[DirEntry]:
    """List a directory, sorted by entry name.

    Raises:
        InvalidPathError: If the directory does not exist or is not a directory.
    """
    try:
        with os.scandir(path) as it:
            entries = [DirEntry(name=e.name, is_file=e.is_file(), is_dir=e.is_dir()) for e in it]
    except FileNotFoundError as e:
        raise InvalidPathError(path=path, reason="could not find directory", cause=e) from e
    except NotADirectoryError as e:
        raise InvalidPathError(path=path, reason="expecting the path to be a directory", cause=e) from e
    return sorted(entries, key=lambda entry: entry.name)


def normalize_service_path(
    service_name: str,
    service_path: str,
    config: Config | None,
    base_path: str,
) -> str:
    """Resolve a relative service path.

    A path starting with ``.`` is relative to the config file that declared
    ``locator.<service_name>``, or to ``base_path`` when no file declared it.
    """
    if not service_path.startswith("."):
        return service_path

    config_file = config.find_absolute_path(("locator", service_name)) if config is not None else None
    base = os.path.dirname(config_file) if config_file else base_path
    return os.path.normpath(os.path.join(base, service_path))


async def expand_wildcards(declaration: ServiceDeclaration) -> list[ServiceDeclaration]:
    """Expand the ``*`` wildcards of a declaration into concrete declarations.

    Every wildcard in the path matches one directory entry: a directory when
    the pattern continues with a path separator, otherwise a service file.
    The matched text is spliced into the name at the same wildcard position.

    Raises:
        InvalidPathError: On mismatched wildcard counts, an unreadable
            directory, or when nothing matched.
    """
    split_name = declaration.name.split(WILDCARD)
    split_path = declaration.path.split(WILDCARD)

    if len(split_name) != len(split_path):
        raise InvalidPathError(
            path=declaration.path,
            reason=(
                f"mismatched wildcard count, name '{declaration.name}' has {len(split_name) - 1} "
                f"and path has {len(split_path) - 1}"
            ),
        )

    final_depth = len(split_path)
    results: list[ServiceDeclaration] = []
    stack: list[tuple[str, str, int]] = [(split_name[0], split_path[0], 1)]

    while stack:
        partial_name, partial_path, depth = stack.pop()

        if depth == final_depth:
            results.append(ServiceDeclaration(name=partial_name, path=partial_path, uses=list(declaration.uses)))
            continue

        entries = await asyncio.to_thread(list_directory, partial_path)
        next_name = split_name[depth]
        next_path = split_path[depth]
        children: list[tuple[str, str, int]] = []

        for entry in entries:
            if entry.is_file and depth == final_depth - 1:
                if not is_service_file(entry.name, next_path):
                    continue
                matched = entry.name[: len(entry.name) - len(next_path)]
                children.append((partial_name + matched + next_name, partial_path + entry.name, depth + 1))
            elif entry.is_dir:
                if not next_path.startswith(os.sep) or not is_service_dir(entry.name):
                    continue
                children.append(
                    (partial_name + entry.name + next_name, partial_path + entry.name + next_path, depth + 1)
                )

        # Reversed so entries are emitted in listing order.
        stack.extend(reversed(children))

    if not results:
        raise InvalidPathError(path=declaration.path, reason=f"no matching service found for '{declaration.name}'")

    logger.debug("Expanded '%s' to %d services", declaration.name, len(results))
    return results


async def expand_service_map(
    service_map: Any,
    config: Config | None = None,
    base_path: str | None = None,
) -> list[ServiceDeclaration]:
    """Normalize a service map and expand every entry into concrete declarations."""
    base = base_path if base_path is not None else os.getcwd()
    declarations: list[ServiceDeclaration] = []

    for service_name, service_config in normalize_service_map(service_map).items():
        if service_config is None or service_config is False:
            continue
        declaration = normalize_service_config(service_name, service_config)
        declaration.path = normalize_service_path(declaration.name, declaration.path, config, base)
        declarations.extend(await expand_wildcards(declaration))

    return declarations
