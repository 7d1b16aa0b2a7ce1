"""Resolution of service paths to files, directories or importable modules."""

from __future__ import annotations

import importlib.util
import os
from typing import Any, Awaitable, Callable

from svclocator.errors import ResolvePathError

__all__ = ["PathResolver"]

PathCallback = Callable[[str], Awaitable[Any]]


def _is_module_name(name: str) -> bool:
    return bool(name) and all(part.isidentifier() for part in name.split("."))


class PathResolver:
    """Resolve a service path against a base directory.

    Relative paths are joined to ``base_path``. A path that names neither a
    file nor a directory may still be the dotted name of an importable module.
    """

    def __init__(self, base_path: str | os.PathLike[str] | None = None) -> None:
        self.base_path = os.path.abspath(base_path if base_path is not None else os.getcwd())

    def to_absolute(self, path: str) -> str:
        if os.path.isabs(path):
            return os.path.normpath(path)
        return os.path.normpath(os.path.join(self.base_path, path))

    async def resolve(
        self,
        path: str,
        on_file: PathCallback,
        on_directory: PathCallback,
        on_module: PathCallback | None = None,
    ) -> Any:
        """Dispatch ``path`` to the callback matching what it points at.

        Raises:
            ResolvePathError: If the path points at nothing loadable.
        """
        absolute = self.to_absolute(path)

        if os.path.isfile(absolute):
            return await on_file(absolute)
        if os.path.isdir(absolute):
            return await on_directory(absolute)
        if not absolute.endswith(".py") and os.path.isfile(absolute + ".py"):
            return await on_file(absolute + ".py")

        if on_module is not None and _is_module_name(path):
            try:
                spec = importlib.util.find_spec(path)
            except (ImportError, ValueError):
                spec = None
            if spec is not None:
                return await on_module(path)

        raise ResolvePathError(path=path)
