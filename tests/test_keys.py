"""Tests for cache-key derivation."""

from __future__ import annotations

import pytest

from cacheaside.exceptions import CacheAsideError, ConfigurationError
from cacheaside.keys import canonical_json, derive_key
from cacheaside.models import RequestOptions


class TestDeriveKey:
    def test_deterministic(self) -> None:
        assert derive_key("GET", "/a", {"x": 1}) == derive_key("GET", "/a", {"x": 1})

    def test_differs_by_config_value(self) -> None:
        assert derive_key("GET", "/a", {"x": 1}) != derive_key("GET", "/a", {"x": 2})

    def test_differs_by_url(self) -> None:
        assert derive_key("GET", "/a", None) != derive_key("GET", "/b", None)

    def test_differs_by_method(self) -> None:
        assert derive_key("GET", "/a", None) != derive_key("POST", "/a", None)

    def test_method_case_insensitive(self) -> None:
        assert derive_key("get", "/a", None) == derive_key("GET", "/a", None)

    def test_layout(self) -> None:
        key = derive_key("GET", "https://api.example.com/users", {"params": {"page": 1}})
        assert key == 'GET:https://api.example.com/users:{"params":{"page":1}}'

    def test_empty_options(self) -> None:
        assert derive_key("GET", "/a") == "GET:/a:{}"
        assert derive_key("GET", "/a", {}) == "GET:/a:{}"
        assert derive_key("GET", "/a", RequestOptions()) == "GET:/a:{}"

    def test_insertion_order_does_not_matter(self) -> None:
        first = {"params": {"a": 1, "b": 2}, "headers": {"X-One": "1", "X-Two": "2"}}
        second = {"headers": {"X-Two": "2", "X-One": "1"}, "params": {"b": 2, "a": 1}}
        assert derive_key("GET", "/a", first) == derive_key("GET", "/a", second)

    def test_extra_options_take_part(self) -> None:
        assert derive_key("GET", "/a", {"auth": "u1"}) != derive_key("GET", "/a", {"auth": "u2"})

    def test_headers_distinguish_requests(self) -> None:
        en = {"headers": {"Accept-Language": "en"}}
        fr = {"headers": {"Accept-Language": "fr"}}
        assert derive_key("GET", "/a", en) != derive_key("GET", "/a", fr)

    def test_none_fields_dropped(self) -> None:
        assert derive_key("GET", "/a", {"timeout": None}) == derive_key("GET", "/a", {})

    def test_dict_and_model_agree(self) -> None:
        options = {"params": {"q": "x"}, "timeout": 5}
        assert derive_key("GET", "/a", options) == derive_key(
            "GET", "/a", RequestOptions(params={"q": "x"}, timeout=5)
        )

    def test_prefix(self) -> None:
        assert derive_key("GET", "/a", prefix="svc:") == "svc:GET:/a:{}"

    def test_numeric_header_values_stringified(self) -> None:
        assert derive_key("GET", "/a", {"headers": {"X-Page": 1}}) == (
            'GET:/a:{"headers":{"X-Page":"1"}}'
        )
        assert derive_key("GET", "/a", {"headers": {"X-Page": 1}}) == derive_key(
            "GET", "/a", {"headers": {"X-Page": "1"}}
        )

    @pytest.mark.parametrize(
        "options",
        [{"params": "page=1"}, {"headers": "X-Page: 1"}, {"timeout": "soon"}],
    )
    def test_malformed_options(self, options: dict) -> None:
        with pytest.raises(ConfigurationError, match="Invalid request options") as exc_info:
            derive_key("GET", "/a", options)
        assert isinstance(exc_info.value, CacheAsideError)


class TestCanonicalJson:
    def test_sorted_nested(self) -> None:
        assert canonical_json({"b": {"d": 1, "c": 2}, "a": [3, 1]}) == '{"a":[3,1],"b":{"c":2,"d":1}}'

    def test_non_json_values_stringified(self) -> None:
        class Token:
            def __str__(self) -> str:
                return "tok"

        assert canonical_json({"t": Token()}) == '{"t":"tok"}'

    def test_unicode_kept(self) -> None:
        assert canonical_json({"q": "café"}) == '{"q":"café"}'
