"""Tests for export classification and module loading."""

from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from svclocator.errors import ModuleLoadError, ResolvePathError, UnknownLocatorError
from svclocator.paths import PathResolver
from svclocator.registry.entry_point import (
    ModuleLoader,
    classify_export,
    resolve_export,
    resolve_service_path,
)
from svclocator.registry.types import ExportKind, ResolvedExport


def _access(name: str) -> str:
    return f"located:{name}"


# === classify_export() ===


class TestClassifyCallableLocator:
    def test_module_level_function(self) -> None:
        def locate(locator: Any) -> Any:
            return locator("x")

        export = classify_export(SimpleNamespace(locate=locate))
        assert export == ResolvedExport(kind=ExportKind.CALLABLE_LOCATOR, target=locate)

    def test_class_rejected(self) -> None:
        class locate:  # noqa: N801
            pass

        with pytest.raises(UnknownLocatorError) as exc_info:
            classify_export(SimpleNamespace(locate=locate))
        assert "callable function" in exc_info.value.details["reason"]

    def test_locate_takes_precedence_over_default(self) -> None:
        export = classify_export(SimpleNamespace(locate=lambda locator: 1, default=object()))
        assert export.kind is ExportKind.CALLABLE_LOCATOR


class TestClassifyLocatorExport:
    def test_class_with_instance_locate(self) -> None:
        class Locator:
            def locate(self, locator: Any) -> Any:
                return locator("x")

        export = classify_export(SimpleNamespace(Locator=Locator))
        assert export.kind is ExportKind.CLASS_LOCATOR
        assert export.target is Locator

    def test_class_with_static_locate(self) -> None:
        class Locator:
            @staticmethod
            def locate(locator: Any) -> Any:
                return locator("x")

        assert classify_export(SimpleNamespace(Locator=Locator)).kind is ExportKind.INSTANCE_LOCATOR

    def test_object_with_locate(self) -> None:
        locator_obj = SimpleNamespace(locate=lambda locator: locator("x"))
        export = classify_export(SimpleNamespace(Locator=locator_obj))
        assert export == ResolvedExport(kind=ExportKind.INSTANCE_LOCATOR, target=locator_obj)

    def test_class_requiring_constructor_arguments_rejected(self) -> None:
        class Locator:
            def __init__(self, dependency: Any) -> None:
                self.dependency = dependency

            def locate(self, locator: Any) -> Any:
                return self.dependency

        with pytest.raises(UnknownLocatorError):
            classify_export(SimpleNamespace(Locator=Locator))

    def test_class_with_optional_constructor_arguments_accepted(self) -> None:
        class Locator:
            def __init__(self, dependency: Any = None, *args: Any, **kwargs: Any) -> None:
                self.dependency = dependency

            def locate(self, locator: Any) -> Any:
                return self.dependency

        assert classify_export(SimpleNamespace(Locator=Locator)).kind is ExportKind.CLASS_LOCATOR

    def test_locator_without_locate_rejected(self) -> None:
        with pytest.raises(UnknownLocatorError):
            classify_export(SimpleNamespace(Locator=object()))


class TestClassifyDefaultExport:
    def test_plain_value(self) -> None:
        value = {"name": "service"}
        assert classify_export(SimpleNamespace(default=value)) == ResolvedExport(
            kind=ExportKind.PLAIN_VALUE, target=value
        )

    def test_empty_value_is_still_a_service(self) -> None:
        assert classify_export(SimpleNamespace(default={})).kind is ExportKind.PLAIN_VALUE

    def test_object_with_locate(self) -> None:
        default = SimpleNamespace(locate=lambda locator: locator("x"))
        assert classify_export(SimpleNamespace(default=default)).kind is ExportKind.INSTANCE_LOCATOR

    def test_class_with_classmethod_locate(self) -> None:
        class Foo:
            @classmethod
            def locate(cls, locator: Any) -> Any:
                return cls()

        assert classify_export(SimpleNamespace(default=Foo)).kind is ExportKind.INSTANCE_LOCATOR

    def test_class_with_instance_locate_is_plain_value(self) -> None:
        class Foo:
            def locate(self, locator: Any) -> Any:
                return locator("x")

        export = classify_export(SimpleNamespace(default=Foo))
        assert export == ResolvedExport(kind=ExportKind.PLAIN_VALUE, target=Foo)


class TestClassifyUnknown:
    def test_empty_surface(self) -> None:
        with pytest.raises(UnknownLocatorError) as exc_info:
            classify_export(SimpleNamespace(something_else=1))
        assert exc_info.value.code == "LOCATOR_UNKNOWN_LOCATOR"

    def test_none_default_is_absent(self) -> None:
        with pytest.raises(UnknownLocatorError):
            classify_export(SimpleNamespace(default=None))


# === resolve_export() ===


class TestResolveExport:
    @pytest.mark.asyncio
    async def test_plain_value_returned(self) -> None:
        value = object()
        assert await resolve_export(ResolvedExport(ExportKind.PLAIN_VALUE, value), _access) is value

    @pytest.mark.asyncio
    async def test_callable_receives_access(self) -> None:
        export = ResolvedExport(ExportKind.CALLABLE_LOCATOR, lambda locator: locator("db"))
        assert await resolve_export(export, _access) == "located:db"

    @pytest.mark.asyncio
    async def test_class_locator_instantiated(self) -> None:
        class Locator:
            def locate(self, locator: Any) -> Any:
                return (self, locator("db"))

        instance, located = await resolve_export(ResolvedExport(ExportKind.CLASS_LOCATOR, Locator), _access)
        assert isinstance(instance, Locator)
        assert located == "located:db"

    @pytest.mark.asyncio
    async def test_instance_locator_called(self) -> None:
        target = SimpleNamespace(locate=lambda locator: locator("cache"))
        assert await resolve_export(ResolvedExport(ExportKind.INSTANCE_LOCATOR, target), _access) == "located:cache"

    @pytest.mark.asyncio
    async def test_async_locator_awaited(self) -> None:
        async def locate(locator: Any) -> Any:
            return locator("db")

        assert await resolve_export(ResolvedExport(ExportKind.CALLABLE_LOCATOR, locate), _access) == "located:db"

    @pytest.mark.asyncio
    async def test_locator_errors_propagate(self) -> None:
        def locate(locator: Any) -> Any:
            raise KeyError("boom")

        with pytest.raises(KeyError):
            await resolve_export(ResolvedExport(ExportKind.CALLABLE_LOCATOR, locate), _access)


# === ModuleLoader ===


class TestModuleLoader:
    def test_load_file(self, tmp_path: Path) -> None:
        path = tmp_path / "svc.py"
        path.write_text("default = 42\n")
        mod = ModuleLoader().load_file(path)
        assert mod.default == 42

    def test_load_file_cached(self, tmp_path: Path) -> None:
        path = tmp_path / "svc.py"
        path.write_text("default = object()\n")
        loader = ModuleLoader()
        assert loader.load_file(path) is loader.load_file(str(path))

    def test_similar_file_names_get_distinct_modules(self, tmp_path: Path) -> None:
        (tmp_path / "a-b.py").write_text("default = 'dash'\n")
        (tmp_path / "a_b.py").write_text("default = 'underscore'\n")
        loader = ModuleLoader()

        dash = loader.load_file(tmp_path / "a-b.py")
        underscore = loader.load_file(tmp_path / "a_b.py")

        assert dash.__name__ != underscore.__name__
        assert sys.modules[dash.__name__] is dash
        assert sys.modules[underscore.__name__] is underscore
        assert dash.default == "dash"

    def test_dataclasses_in_loaded_module(self, tmp_path: Path) -> None:
        path = tmp_path / "svc.py"
        path.write_text(
            "from __future__ import annotations\n"
            "from dataclasses import dataclass\n\n"
            "@dataclass\n"
            "class Settings:\n"
            "    name: str = 'x'\n\n"
            "default = Settings()\n"
        )
        assert ModuleLoader().load_file(path).default.name == "x"

    def test_import_failure(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.py"
        path.write_text("raise RuntimeError('nope')\n")
        with pytest.raises(ModuleLoadError) as exc_info:
            ModuleLoader().load_file(path)
        assert isinstance(exc_info.value.cause, RuntimeError)
        assert not any(name.startswith("svclocator_ext_broken_") for name in sys.modules)

    def test_load_directory_prefers_locator_file(self, tmp_path: Path) -> None:
        (tmp_path / "locator.py").write_text("default = 'locator'\n")
        (tmp_path / "__init__.py").write_text("default = 'init'\n")
        assert ModuleLoader().load_directory(tmp_path).default == "locator"

    def test_load_directory_package_init(self, tmp_path: Path) -> None:
        (tmp_path / "__init__.py").write_text("from .impl import VALUE\ndefault = VALUE\n")
        (tmp_path / "impl.py").write_text("VALUE = 'impl'\n")
        assert ModuleLoader().load_directory(tmp_path).default == "impl"

    def test_load_directory_without_entry_point(self, tmp_path: Path) -> None:
        (tmp_path / "service.py").write_text("default = 1\n")
        assert ModuleLoader().load_directory(tmp_path) is None

    def test_load_module(self) -> None:
        assert ModuleLoader().load_module("json").__name__ == "json"

    def test_load_module_failure(self) -> None:
        with pytest.raises(ModuleLoadError):
            ModuleLoader().load_module("svclocator_no_such_module_xyz")


# === resolve_service_path() ===


class TestResolveServicePath:
    @pytest.mark.asyncio
    async def test_file(self, tmp_path: Path) -> None:
        (tmp_path / "svc.py").write_text("def locate(locator):\n    return locator('db')\n")
        result = await resolve_service_path("./svc.py", PathResolver(tmp_path), ModuleLoader(), _access)
        assert result == "located:db"

    @pytest.mark.asyncio
    async def test_directory_without_entry_point_yields_none(self, tmp_path: Path) -> None:
        (tmp_path / "services").mkdir()
        result = await resolve_service_path("./services", PathResolver(tmp_path), ModuleLoader(), _access)
        assert result is None

    @pytest.mark.asyncio
    async def test_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(ResolvePathError):
            await resolve_service_path("./missing.py", PathResolver(tmp_path), ModuleLoader(), _access)

    @pytest.mark.asyncio
    async def test_unknown_surface(self, tmp_path: Path) -> None:
        (tmp_path / "svc.py").write_text("VALUE = 1\n")
        with pytest.raises(UnknownLocatorError):
            await resolve_service_path("./svc.py", PathResolver(tmp_path), ModuleLoader(), _access)
