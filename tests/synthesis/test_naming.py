"""Tests for action-oriented tool naming."""

from __future__ import annotations

from openapi_bridge.synthesis.naming import (
    action_for,
    ensure_action_oriented,
    resource_from_path,
    sanitize_tool_name,
    tool_name_for,
)


class TestEnsureActionOriented:
    def test_prefixes_verb_for_method(self) -> None:
        assert ensure_action_oriented("pet", "GET") == "getPet"
        assert ensure_action_oriented("pet", "POST") == "createPet"
        assert ensure_action_oriented("pet", "PUT") == "updatePet"
        assert ensure_action_oriented("pet", "PATCH") == "modifyPet"
        assert ensure_action_oriented("pet", "DELETE") == "deletePet"

    def test_keeps_existing_verb(self) -> None:
        assert ensure_action_oriented("listPets", "GET") == "listPets"
        assert ensure_action_oriented("SearchPets", "POST") == "SearchPets"

    def test_unmapped_method_keeps_id(self) -> None:
        assert ensure_action_oriented("pet", "HEAD") == "pet"
        assert ensure_action_oriented("pet", "OPTIONS") == "pet"


class TestSanitize:
    def test_replaces_invalid_characters(self) -> None:
        assert sanitize_tool_name("get pet/by id") == "get_pet_by_id"

    def test_keeps_dashes_and_underscores(self) -> None:
        assert sanitize_tool_name("get-pet_v2") == "get-pet_v2"

    def test_empty_falls_back(self) -> None:
        assert sanitize_tool_name("///") == "operation"

    def test_tool_name_combines_both(self) -> None:
        assert tool_name_for("pet by id", "GET") == "getPet_by_id"


class TestResources:
    def test_resource_from_path(self) -> None:
        assert resource_from_path("/pets/{petId}") == "pets specific petId"
        assert resource_from_path("/") == "resource"

    def test_action_for(self) -> None:
        assert action_for("get") == "Retrieve"
        assert action_for("TRACE") == "Use"
