"""Tests for the error hierarchy and error codes."""

from __future__ import annotations

import pytest

from svclocator.errors import (
    DeleteError,
    DestroyError,
    DestroyServiceError,
    EagerloadError,
    ErrorCodes,
    InvalidPathError,
    InvalidServiceMapError,
    LocateError,
    LocatorError,
    ServicePriorityError,
)


class TestLocatorError:
    def test_str_format(self):
        err = LocatorError(code="SOME_CODE", message="something broke")
        assert str(err) == "[SOME_CODE] something broke"

    def test_defaults(self):
        err = LocatorError(code="X", message="m")
        assert err.details == {}
        assert err.cause is None
        assert err.timestamp

    def test_cause_kept(self):
        cause = OSError("disk")
        err = LocatorError(code="X", message="m", cause=cause)
        assert err.cause is cause


class TestSubclasses:
    def test_locate_error(self):
        err = LocateError(service_name="mailer")
        assert err.code == ErrorCodes.LOCATOR_LOCATE
        assert err.service_name == "mailer"
        assert "mailer" in err.message

    def test_invalid_service_map_error(self):
        err = InvalidServiceMapError(type_name="int")
        assert err.details == {"type": "int"}
        assert "'int'" in str(err)

    def test_invalid_path_error(self):
        err = InvalidPathError(path="./a/*", reason="could not find directory")
        assert err.path == "./a/*"
        assert err.reason == "could not find directory"

    def test_priority_error_details(self):
        err = ServicePriorityError(service_name="repo", using="db")
        assert err.details == {"service_name": "repo", "using": "db"}

    def test_delete_error(self):
        err = DeleteError(service_name="db", used_by="repo")
        assert err.code == ErrorCodes.LOCATOR_DELETE
        assert "used by 'repo'" in err.message

    def test_eagerload_error_causes_copied(self):
        causes: list[BaseException] = [LocateError(service_name="a")]
        err = EagerloadError("Could not resolve service map", causes, details={"attempt": 1})
        causes.clear()
        assert len(err.causes) == 1
        assert err.details == {"attempt": 1}

    def test_destroy_error_lists_services(self):
        err = DestroyError([DestroyServiceError(service_name="a"), DestroyServiceError(service_name="b")])
        assert err.message == "Destroy for 2 services was rejected"
        assert err.details == {"services": ["a", "b"]}


class TestErrorCodes:
    def test_immutable(self):
        with pytest.raises(AttributeError):
            ErrorCodes().LOCATOR_LOCATE = "other"

    def test_codes_match_their_names(self):
        for name, value in vars(ErrorCodes).items():
            if name.isupper():
                assert name == value
