"""Tests for response body extraction and the CLI rendering bridge."""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx

from cacheaside.client.response import extract_response_data, format_body
from cacheaside.output import OutputManager, set_output


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_response(
    status_code: int = 200,
    content: bytes | None = None,
    json_data: object | None = None,
    text: str | None = None,
) -> httpx.Response:
    """Build an httpx.Response with the given body."""
    request = httpx.Request("GET", "https://api.example.com/test")
    if json_data is not None:
        return httpx.Response(status_code=status_code, json=json_data, request=request)
    if text is not None:
        return httpx.Response(status_code=status_code, text=text, request=request)
    return httpx.Response(status_code=status_code, content=content or b"", request=request)


# ---------------------------------------------------------------------------
# extract_response_data
# ---------------------------------------------------------------------------


class TestExtractResponseData:
    def test_json_parse(self) -> None:
        response = _make_response(json_data={"key": "value", "nested": {"a": 1}})
        assert extract_response_data(response) == {"key": "value", "nested": {"a": 1}}

    def test_json_list_parse(self) -> None:
        assert extract_response_data(_make_response(json_data=[1, 2, 3])) == [1, 2, 3]

    def test_json_without_content_type(self) -> None:
        response = _make_response(content=b'{"key": "value"}')
        assert extract_response_data(response) == {"key": "value"}

    def test_fallback_to_text(self) -> None:
        assert extract_response_data(_make_response(text="This is not JSON")) == "This is not JSON"

    def test_html_is_text(self) -> None:
        assert extract_response_data(_make_response(text="<html></html>")) == "<html></html>"

    def test_empty_body_is_none(self) -> None:
        assert extract_response_data(_make_response(status_code=204)) is None


# ---------------------------------------------------------------------------
# format_body
# ---------------------------------------------------------------------------


class TestFormatBody:
    def test_body_rendered(self) -> None:
        mock_output = MagicMock(spec=OutputManager)
        set_output(mock_output)

        format_body({"users": [{"id": 1}]})

        mock_output.format_response.assert_called_once_with({"users": [{"id": 1}]})

    def test_none_not_rendered(self) -> None:
        mock_output = MagicMock(spec=OutputManager)
        set_output(mock_output)

        format_body(None)

        mock_output.format_response.assert_not_called()

    def test_falsy_body_still_rendered(self) -> None:
        mock_output = MagicMock(spec=OutputManager)
        set_output(mock_output)

        format_body([])

        mock_output.format_response.assert_called_once_with([])
