"""Tests for the format_result dispatcher and OutputSettings."""

import json

import pytest

from blackmamba.output.formatters import OutputSettings, format_result
from blackmamba.services.result import ServiceError, ServiceResult


def _ok(op: str = "test", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "test", msg: str = "fail") -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code="ERR", message=msg),
    )


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False

    def test_frozen(self) -> None:
        s = OutputSettings(json_output=True)
        with pytest.raises(AttributeError):
            s.quiet = True  # type: ignore[misc]


class TestFormatResultJSON:
    def test_json_mode_returns_valid_json(self) -> None:
        result = _ok("execute", app="greeter", result="Hello John")
        output = format_result(result, settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is True
        assert data["op"] == "execute"
        assert data["data"]["result"] == "Hello John"

    def test_json_mode_error(self) -> None:
        output = format_result(_err("execute", "Bad"), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is False
        assert data["error"]["message"] == "Bad"

    def test_json_wins_over_quiet(self) -> None:
        output = format_result(
            _ok("execute", result="x"), settings=OutputSettings(json_output=True, quiet=True)
        )
        assert json.loads(output)["ok"] is True


class TestFormatResultText:
    def test_default_settings_render_human(self) -> None:
        output = format_result(_ok("execute", app="greeter", cmd="greet", result="Hello John"))
        assert "OK" in output
        assert "Hello John" in output

    def test_quiet_mode(self) -> None:
        output = format_result(
            _ok("execute", result="Hello John"), settings=OutputSettings(quiet=True)
        )
        assert output == "Hello John"
