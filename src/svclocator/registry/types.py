"""Registry types: ServiceDeclaration, DirEntry, ExportKind, ResolvedExport."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "ServiceDeclaration",
    "DirEntry",
    "ExportKind",
    "ResolvedExport",
]


@dataclass
class ServiceDeclaration:
    """A declared service: its name, where to load it from, and what it uses.

    ``name`` and ``path`` may both contain ``*`` wildcards until expanded.
    """

    name: str
    path: str
    uses: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DirEntry:
    """One entry of a directory listing."""

    name: str
    is_file: bool
    is_dir: bool


class ExportKind(enum.Enum):
    """How a loaded module surface produces its service instance."""

    CALLABLE_LOCATOR = "callable_locator"
    CLASS_LOCATOR = "class_locator"
    INSTANCE_LOCATOR = "instance_locator"
    PLAIN_VALUE = "plain_value"


@dataclass(frozen=True)
class ResolvedExport:
    """The classified surface of a loaded module.

    ``target`` is the function to call for ``CALLABLE_LOCATOR``, the class to
    instantiate for ``CLASS_LOCATOR``, the object owning ``locate`` for
    ``INSTANCE_LOCATOR``, and the instance itself for ``PLAIN_VALUE``.
    """

    kind: ExportKind
    target: Any
