"""
TokiKV — Error Taxonomy Tests
"""

import pytest

from tokikv.errors import (
    CacheConnectionError,
    CacheError,
    CacheIOError,
    ConfigurationError,
    DecodeError,
    EncodeError,
    ErrorKind,
    NotFoundError,
    TokiKVError,
    extract_error_kind,
    is_not_found,
)


class TestErrorKinds:
    """Every error carries a kind callers can branch on."""

    @pytest.mark.parametrize(
        ("error", "kind"),
        [
            (NotFoundError("k"), ErrorKind.NOT_FOUND),
            (DecodeError("bad"), ErrorKind.DECODE),
            (EncodeError("bad"), ErrorKind.ENCODE),
            (CacheIOError("disk"), ErrorKind.IO),
            (CacheConnectionError("redis"), ErrorKind.CONNECTION),
            (ConfigurationError("scheme"), ErrorKind.CONFIGURATION),
        ],
    )
    def test_kind(self, error: TokiKVError, kind: ErrorKind) -> None:
        assert error.kind is kind
        assert extract_error_kind(error) is kind

    def test_foreign_exception_has_no_kind(self) -> None:
        assert extract_error_kind(ValueError("x")) is None
        assert is_not_found(ValueError("x")) is False

    def test_is_not_found(self) -> None:
        assert is_not_found(NotFoundError("k")) is True
        assert is_not_found(DecodeError("k")) is False

    def test_hierarchy(self) -> None:
        for cls in (NotFoundError, DecodeError, EncodeError, CacheIOError, CacheConnectionError):
            assert issubclass(cls, CacheError)
        assert not issubclass(ConfigurationError, CacheError)
        assert issubclass(ConfigurationError, TokiKVError)

    def test_status_codes(self) -> None:
        assert NotFoundError("k").status_code == 404
        assert CacheConnectionError("redis").status_code == 503
        assert DecodeError("x").status_code == 500
        assert ConfigurationError("x").status_code == 500

    def test_not_found_details(self) -> None:
        err = NotFoundError("user-1", details={"expired": True})
        assert err.key == "user-1"
        assert err.details == {"key": "user-1", "expired": True}
        assert str(err) == "Not found: user-1"

    def test_to_dict(self) -> None:
        err = CacheConnectionError("redis", details={"op": "get"})
        assert err.to_dict() == {
            "error": "CacheConnectionError",
            "kind": "connection",
            "message": "Failed to talk to cache backend: redis",
            "details": {"op": "get"},
        }
