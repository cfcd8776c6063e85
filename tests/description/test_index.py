"""Tests for the description index."""

from __future__ import annotations

from typing import Any

import pytest

from openapi_bridge.description import DescriptionIndex, build_index, parse_document
from openapi_bridge.description.index import synthetic_operation_id
from openapi_bridge.errors import ParseError


def _doc(paths: dict[str, Any], **extra: Any) -> dict[str, Any]:
    return {"openapi": "3.0.0", "info": {"title": "T", "version": "1"}, "paths": paths, **extra}


class TestParseDocument:
    def test_json(self) -> None:
        assert parse_document('{"paths": {}}') == {"paths": {}}

    def test_yaml(self) -> None:
        assert parse_document("openapi: 3.0.0\npaths: {}\n") == {"openapi": "3.0.0", "paths": {}}

    def test_bytes(self) -> None:
        assert parse_document(b'{"a": 1}') == {"a": 1}

    def test_invalid_utf8_bytes_raise(self) -> None:
        with pytest.raises(ParseError, match="not valid UTF-8"):
            parse_document(b"\xff\xfe paths: {}")

    def test_build_index_invalid_utf8_raises(self) -> None:
        with pytest.raises(ParseError):
            build_index(b"\xff\xfe paths: {}")

    def test_invalid_text_raises(self) -> None:
        with pytest.raises(ParseError, match="neither valid JSON nor YAML"):
            parse_document("paths: [unclosed")

    def test_non_mapping_raises(self) -> None:
        with pytest.raises(ParseError, match="mapping"):
            parse_document("[1, 2, 3]")


class TestBuildIndex:
    def test_one_operation_per_path_and_method(self, petstore_index: DescriptionIndex) -> None:
        pairs = [(op.method, op.path) for op in petstore_index.operations]
        assert pairs == [
            ("GET", "/pets"),
            ("POST", "/pets"),
            ("GET", "/pet/{petId}"),
            ("DELETE", "/pet/{petId}"),
            ("GET", "/pets/{limit}/top"),
        ]
        ids = [op.operation_id for op in petstore_index.operations]
        assert len(set(ids)) == len(ids)

    def test_document_metadata(self, petstore_index: DescriptionIndex) -> None:
        assert petstore_index.title == "Petstore"
        assert petstore_index.version == "1.0.0"
        assert petstore_index.default_server == "https://petstore.example.com/v1"
        assert petstore_index.tag_descriptions == {"pets": "Everything about pets"}
        assert set(petstore_index.security_schemes) == {"bearer", "apikey"}

    def test_get_lookup(self, petstore_index: DescriptionIndex) -> None:
        op = petstore_index.get("/pets", "post")
        assert op is not None
        assert op.operation_id == "createPet"
        assert petstore_index.get("/pets", "PUT") is None

    def test_accepts_yaml_text(self) -> None:
        text = (
            "openapi: 3.0.0\n"
            "info: {title: Y, version: '2'}\n"
            "paths:\n"
            "  /ping:\n"
            "    get:\n"
            "      operationId: ping\n"
        )
        index = build_index(text)
        assert [op.operation_id for op in index.operations] == ["ping"]

    def test_missing_paths_raises(self) -> None:
        with pytest.raises(ParseError, match="paths"):
            build_index({"openapi": "3.0.0", "info": {"title": "x"}})

    def test_empty_paths_is_valid(self) -> None:
        assert build_index(_doc({})).operations == []


class TestParameters:
    def test_path_level_parameters_are_inherited(self, petstore_index: DescriptionIndex) -> None:
        for method in ("GET", "DELETE"):
            op = petstore_index.get("/pet/{petId}", method)
            assert op is not None
            assert [p.name for p in op.parameters_in("path")] == ["petId"]

    def test_operation_parameter_overrides_path_level(self) -> None:
        doc = _doc({
            "/items": {
                "parameters": [{"name": "q", "in": "query", "description": "outer"}],
                "get": {
                    "operationId": "listItems",
                    "parameters": [{"name": "q", "in": "query", "description": "inner"}],
                },
            },
        })
        op = build_index(doc).operations[0]
        assert len(op.parameters) == 1
        assert op.parameters[0].description == "inner"

    def test_path_parameters_are_always_required(self) -> None:
        doc = _doc({
            "/items/{id}": {
                "get": {"parameters": [{"name": "id", "in": "path", "required": False}]},
            },
        })
        assert build_index(doc).operations[0].parameters[0].required is True

    def test_path_parameter_without_placeholder_raises(self) -> None:
        doc = _doc({"/items": {"get": {"parameters": [{"name": "id", "in": "path"}]}}})
        with pytest.raises(ParseError, match="no placeholder"):
            build_index(doc)

    def test_cookie_parameters_are_skipped(self) -> None:
        doc = _doc({"/items": {"get": {"parameters": [{"name": "session", "in": "cookie"}]}}})
        assert build_index(doc).operations[0].parameters == []

    def test_malformed_parameter_raises(self) -> None:
        doc = _doc({"/items": {"get": {"parameters": [{"in": "query"}]}}})
        with pytest.raises(ParseError, match="Malformed parameter"):
            build_index(doc)

    def test_parameter_refs_are_resolved(self) -> None:
        doc = _doc(
            {"/items": {"get": {"parameters": [{"$ref": "#/components/parameters/Limit"}]}}},
            components={"parameters": {"Limit": {"name": "limit", "in": "query"}}},
        )
        assert build_index(doc).operations[0].parameters[0].name == "limit"


class TestOperationIds:
    def test_synthetic_id_when_missing(self) -> None:
        doc = _doc({"/things/{id}": {"get": {}}})
        assert build_index(doc).operations[0].operation_id == "get_things_id"

    def test_synthetic_id_shape(self) -> None:
        assert synthetic_operation_id("GET", "/pets/{petId}") == "get_pets_petId"
        assert synthetic_operation_id("post", "/") == "post"

    def test_duplicate_ids_are_suffixed(self) -> None:
        doc = _doc({
            "/a": {"get": {"operationId": "getPet"}},
            "/b": {"get": {"operationId": "getPet"}},
        })
        ids = [op.operation_id for op in build_index(doc).operations]
        assert ids == ["getPet", "getPet_2"]


class TestRequestBody:
    def test_ref_schema_is_inlined(self, petstore_index: DescriptionIndex) -> None:
        op = petstore_index.get("/pets", "POST")
        assert op is not None and op.request_body is not None
        assert op.request_body.required is True
        assert op.request_body.content_type == "application/json"
        assert op.request_body.schema_["properties"]["name"] == {"type": "string"}

    def test_json_is_preferred(self) -> None:
        doc = _doc({
            "/items": {
                "post": {
                    "requestBody": {
                        "content": {
                            "application/xml": {"schema": {"type": "string"}},
                            "application/json": {"schema": {"type": "object"}},
                        },
                    },
                },
            },
        })
        body = build_index(doc).operations[0].request_body
        assert body is not None
        assert body.content_type == "application/json"

    def test_first_content_type_otherwise(self) -> None:
        doc = _doc({
            "/upload": {
                "put": {"requestBody": {"content": {"application/octet-stream": {}}}},
            },
        })
        body = build_index(doc).operations[0].request_body
        assert body is not None
        assert body.content_type == "application/octet-stream"

    def test_recursive_schema_gets_placeholder(self) -> None:
        doc = _doc(
            {
                "/nodes": {
                    "post": {
                        "requestBody": {
                            "content": {
                                "application/json": {"schema": {"$ref": "#/components/schemas/Node"}},
                            },
                        },
                    },
                },
            },
            components={
                "schemas": {
                    "Node": {
                        "type": "object",
                        "properties": {
                            "children": {"type": "array", "items": {"$ref": "#/components/schemas/Node"}},
                        },
                    },
                },
            },
        )
        body = build_index(doc).operations[0].request_body
        assert body is not None
        items = body.schema_["properties"]["children"]["items"]
        assert items == {"type": "object", "description": "Recursive reference to Node"}

    def test_unresolvable_ref_raises(self) -> None:
        doc = _doc({
            "/items": {
                "post": {
                    "requestBody": {
                        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Nope"}}},
                    },
                },
            },
        })
        with pytest.raises(ParseError, match="Unresolvable reference"):
            build_index(doc)


class TestSecurity:
    def test_operation_security(self, petstore_index: DescriptionIndex) -> None:
        op = petstore_index.get("/pets", "POST")
        assert op is not None
        assert [r.scheme_name for r in op.security] == ["bearer"]
        assert op.security[0].scheme is not None
        assert op.security[0].scheme.scheme == "bearer"

    def test_root_security_applies_by_default(self) -> None:
        doc = _doc(
            {"/a": {"get": {}}, "/b": {"get": {"security": []}}},
            security=[{"key": ["read"]}],
            components={"securitySchemes": {"key": {"type": "apiKey", "in": "header", "name": "K"}}},
        )
        a, b = build_index(doc).operations
        assert [(r.scheme_name, r.scopes) for r in a.security] == [("key", ["read"])]
        assert b.security == []

    def test_undeclared_scheme_is_kept(self) -> None:
        doc = _doc({"/a": {"get": {"security": [{"ghost": []}]}}})
        requirement = build_index(doc).operations[0].security[0]
        assert requirement.scheme_name == "ghost"
        assert requirement.scheme is None
