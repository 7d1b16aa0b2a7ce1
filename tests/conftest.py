"""Shared fixtures for the svclocator test suite."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from service_helpers import PLAIN_SERVICE, WriteService
from svclocator import ServiceLocator


@pytest.fixture
def write_service(tmp_path: Path) -> WriteService:
    """Return a helper writing a service module relative to tmp_path."""

    def _write(relative_path: str, content: str = PLAIN_SERVICE) -> Path:
        path = tmp_path / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content))
        return path

    return _write

@pytest.fixture
def locator(tmp_path: Path) -> ServiceLocator:
    """A ServiceLocator resolving relative paths against tmp_path."""
    return ServiceLocator(base_path=tmp_path)
