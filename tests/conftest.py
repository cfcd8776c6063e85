"""Shared fixtures: a small petstore description and a recording HTTP transport."""

from __future__ import annotations

import copy
import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from openapi_bridge.config import BridgeConfig
from openapi_bridge.description import DescriptionIndex, build_index

BASE_URL = "https://petstore.example.com/v1"

PETSTORE: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Petstore", "version": "1.0.0"},
    "servers": [{"url": BASE_URL}],
    "tags": [{"name": "pets", "description": "Everything about pets"}],
    "components": {
        "securitySchemes": {
            "bearer": {"type": "http", "scheme": "bearer"},
            "apikey": {"type": "apiKey", "in": "header", "name": "X-API-Key"},
        },
        "schemas": {
            "Pet": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "id": {"type": "integer"},
                    "name": {"type": "string"},
                    "tag": {"type": "string"},
                },
            },
        },
    },
    "paths": {
        "/pets": {
            "get": {
                "operationId": "listPets",
                "summary": "List all pets",
                "tags": ["pets"],
                "parameters": [
                    {
                        "name": "limit",
                        "in": "query",
                        "description": "How many items to return",
                        "schema": {"type": "integer"},
                    },
                    {"name": "X-Request-Id", "in": "header", "schema": {"type": "string"}},
                ],
            },
            "post": {
                "operationId": "createPet",
                "summary": "Create a pet",
                "tags": ["pets"],
                "security": [{"bearer": []}],
                "requestBody": {
                    "required": True,
                    "content": {
                        "application/json": {"schema": {"$ref": "#/components/schemas/Pet"}},
                    },
                },
            },
        },
        "/pet/{petId}": {
            "parameters": [
                {"name": "petId", "in": "path", "required": True, "schema": {"type": "string"}},
            ],
            "get": {
                "operationId": "getPetById",
                "summary": "Info for a specific pet",
                "security": [{"apikey": []}],
            },
            "delete": {
                "operationId": "deletePet",
                "deprecated": True,
            },
        },
        "/pets/{limit}/top": {
            "get": {
                "operationId": "topPets",
                "parameters": [
                    {"name": "limit", "in": "path", "required": True, "schema": {"type": "integer"}},
                ],
            },
        },
    },
}


@pytest.fixture
def petstore() -> dict[str, Any]:
    return copy.deepcopy(PETSTORE)


@pytest.fixture
def petstore_json(petstore: dict[str, Any]) -> str:
    return json.dumps(petstore)


@pytest.fixture
def petstore_index(petstore: dict[str, Any]) -> DescriptionIndex:
    return build_index(petstore)


@pytest.fixture
def config() -> BridgeConfig:
    return BridgeConfig(base_url=BASE_URL)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def json_transport() -> RecordingTransport:
    """Answers every request with ``200 {"id": 1, "name": "Rex"}``."""
    return RecordingTransport(lambda _: httpx.Response(200, json={"id": 1, "name": "Rex"}))


@pytest.fixture
def make_transport() -> Callable[[Callable[[httpx.Request], httpx.Response]], RecordingTransport]:
    """Build a :class:`RecordingTransport` around a request handler."""
    return RecordingTransport
