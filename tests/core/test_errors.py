"""Tests for error types and codes."""

import pytest

from ccview.clearcase.errors import (
    AmbiguousVersionError,
    ConfigSpecParseError,
    ListingError,
    MalformedPathError,
)
from ccview.core.errors import (
    CCViewError,
    ConfigError,
    ErrorCode,
    describe_error,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.CONFIG_SPEC_PARSE_ERROR, 3000),
            (ErrorCode.MALFORMED_PATH, 4000),
            (ErrorCode.AMBIGUOUS_VERSION, 4000),
            (ErrorCode.HISTORY_PARSE_ERROR, 5000),
            (ErrorCode.LISTING_FAILED, 6000),
            (ErrorCode.INTERNAL_ERROR, 9000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        # When
        value = code.value

        # Then
        assert expected_range <= value < expected_range + 1000


class TestCCViewError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = CCViewError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_includes_code_and_name(self) -> None:
        error = CCViewError(code=ErrorCode.INTERNAL_ERROR, message="boom")
        assert str(error) == "[9001] INTERNAL_ERROR: boom"


class TestConfigError:
    """Config error factory tests."""

    def test_parse_error(self) -> None:
        error = ConfigError.parse_error("/v/.ccview/config.yaml", "bad indent")
        assert error.code == ErrorCode.CONFIG_PARSE_ERROR
        assert error.details["path"] == "/v/.ccview/config.yaml"

    def test_invalid_value(self) -> None:
        error = ConfigError.invalid_value("clearcase.noise_branch", 3, "not a string")
        assert error.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "clearcase.noise_branch" in error.message


class TestDescribeError:
    """describe_error renders domain and foreign errors alike."""

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (MalformedPathError("/a/../..", "invalid parent links balance"), ErrorCode.MALFORMED_PATH),
            (ConfigSpecParseError(3, "element", "expected <pattern>"), ErrorCode.CONFIG_SPEC_PARSE_ERROR),
            (AmbiguousVersionError("/v/a.c", ["/main/2", "/main/rel/2"]), ErrorCode.AMBIGUOUS_VERSION),
            (ListingError("lsvtree", "cleartool: Error: boom"), ErrorCode.LISTING_FAILED),
            (RuntimeError("unexpected"), ErrorCode.INTERNAL_ERROR),
        ],
    )
    def test_code_is_taken_from_error(self, error: Exception, expected: ErrorCode) -> None:
        result = describe_error(error)
        assert result["code"] == expected.value
        assert result["error"] == expected.name
        assert result["message"] == str(error)

    def test_ccview_error_uses_to_dict(self) -> None:
        error = ConfigError.invalid_value("logging.level", "LOUD", "not a log level")
        assert describe_error(error) == error.to_dict()
