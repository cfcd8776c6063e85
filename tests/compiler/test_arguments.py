"""Tests for argument classification and rendering."""

from __future__ import annotations

from openapi_bridge.compiler import ArgumentClass, auth_header, classify_argument, render_value


class TestClassifyArgument:
    def test_precedence(self) -> None:
        placeholders = frozenset({"petId", "body", "header_x"})
        assert classify_argument("petId", placeholders) == (ArgumentClass.PATH, "petId")
        # A placeholder wins over the reserved names.
        assert classify_argument("body", placeholders) == (ArgumentClass.PATH, "body")
        assert classify_argument("header_x", placeholders) == (ArgumentClass.PATH, "header_x")

    def test_reserved_keys(self) -> None:
        none: frozenset[str] = frozenset()
        assert classify_argument("body", none) == (ArgumentClass.BODY, "body")
        assert classify_argument("header_Accept", none) == (ArgumentClass.HEADER, "Accept")
        assert classify_argument("auth_bearer", none) == (ArgumentClass.AUTH, "bearer")
        assert classify_argument("limit", none) == (ArgumentClass.QUERY, "limit")


class TestRenderValue:
    def test_scalars(self) -> None:
        assert render_value(True) == "true"
        assert render_value(False) == "false"
        assert render_value(3) == "3"
        assert render_value(1.5) == "1.5"
        assert render_value("x") == "x"

    def test_structures_are_compact_json(self) -> None:
        assert render_value({"a": [1, 2]}) == '{"a":[1,2]}'
        assert render_value([1, "b"]) == '[1,"b"]'


class TestAuthHeader:
    def test_bearer_and_token(self) -> None:
        assert auth_header("bearer", "T") == ("Authorization", "Bearer T")
        assert auth_header("Token", "T") == ("Authorization", "Bearer T")

    def test_basic(self) -> None:
        assert auth_header("basic", "dXNlcjpwYXNz") == ("Authorization", "Basic dXNlcjpwYXNz")

    def test_apikey(self) -> None:
        assert auth_header("ApiKey", "K") == ("X-API-Key", "K")

    def test_fallback(self) -> None:
        assert auth_header("X-Custom", "v") == ("X-Custom", "v")
