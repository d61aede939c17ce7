"""Tests for error mapper functionality.

These tests verify:
1. Error codes are derived from exception classes
2. Recovery strategies are included
3. MCP and web response structures are correct
4. HTTP status mapping
"""

from cdyouth_mcp.errors.mapper import (
    HTTP_STATUS,
    RECOVERY_STRATEGIES,
    create_error_response,
    error_to_mcp_response,
    error_to_web_response,
    get_error_code,
    get_http_status,
    get_recovery_strategy,
)
from cdyouth_mcp.exceptions import (
    ActivitiesError,
    NetworkError,
    ParseError,
    ResourceNotFoundError,
    SessionNotFoundError,
    ToolNotFoundError,
    ValidationError,
)


class TestGetErrorCode:
    """Tests for error code extraction from exceptions."""

    def test_simple_error_class(self):
        assert get_error_code(NetworkError("boom")) == "NETWORK"

    def test_compound_error_class(self):
        assert get_error_code(SessionNotFoundError("x")) == "SESSION_NOT_FOUND"

    def test_matches_instance_codes(self):
        for error in (NetworkError("a"), ParseError("b"), SessionNotFoundError("c"), ToolNotFoundError("d")):
            assert get_error_code(error) == error.code

    def test_base_error_class(self):
        assert get_error_code(ActivitiesError("X", "y")) == "ACTIVITIES"


class TestRecoveryStrategies:
    """Tests for recovery strategy lookup."""

    def test_known_codes_have_strategies(self):
        for code in ("NETWORK", "PARSE", "VALIDATION", "SESSION_NOT_FOUND", "TOOL_NOT_FOUND", "CONFIGURATION"):
            assert code in RECOVERY_STRATEGIES

    def test_specific_strategy(self):
        error = SessionNotFoundError("x")
        assert get_recovery_strategy("SESSION_NOT_FOUND", error) == RECOVERY_STRATEGIES["SESSION_NOT_FOUND"]

    def test_generic_not_found_strategy(self):
        strategy = get_recovery_strategy("SOMETHING_NOT_FOUND", ResourceNotFoundError("X", "y"))
        assert "resource" in strategy.lower()

    def test_generic_fallback(self):
        strategy = get_recovery_strategy("ACTIVITIES", ActivitiesError("X", "y"))
        assert "try again" in strategy.lower()


class TestResponses:
    """Tests for MCP and web response rendering."""

    def test_create_error_response(self):
        response = create_error_response(NetworkError("HTTP 500", {"status_code": 500}))

        assert response.error_code == "NETWORK"
        assert response.message == "HTTP 500"
        assert response.details == {"status_code": 500}
        assert response.recovery_strategy

    def test_mcp_response(self):
        response = error_to_mcp_response(ValidationError("INVALID_LIMIT", "limit must be between 1 and 100"))

        assert response["success"] is False
        assert response["error_code"] == "VALIDATION"
        assert response["message"] == "limit must be between 1 and 100"
        assert "recovery_strategy" in response

    def test_web_response(self):
        response = error_to_web_response(SessionNotFoundError("abc"))

        assert response["error"]["code"] == "SESSION_NOT_FOUND"
        assert response["error"]["details"]["session_id"] == "abc"
        assert response["error"]["recovery"]


class TestHttpStatus:
    """Tests for HTTP status mapping."""

    def test_session_not_found_is_400(self):
        assert get_http_status(SessionNotFoundError("x")) == 400

    def test_table_holds_only_web_errors(self):
        assert HTTP_STATUS == {SessionNotFoundError: 400}

    def test_unmapped_is_500(self):
        assert get_http_status(ToolNotFoundError("x")) == 500
        assert get_http_status(ActivitiesError("X", "y")) == 500
