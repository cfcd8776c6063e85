"""Action-oriented tool naming."""

from __future__ import annotations

import re

ACTION_VERBS = (
    "get",
    "retrieve",
    "fetch",
    "list",
    "find",
    "search",
    "create",
    "add",
    "post",
    "insert",
    "update",
    "modify",
    "change",
    "edit",
    "patch",
    "delete",
    "remove",
    "clear",
)

METHOD_VERBS = {
    "GET": "get",
    "POST": "create",
    "PUT": "update",
    "PATCH": "modify",
    "DELETE": "delete",
}

# Display verbs for generated summaries.
METHOD_ACTIONS = {
    "GET": "Retrieve",
    "POST": "Create",
    "PUT": "Update",
    "PATCH": "Modify",
    "DELETE": "Delete",
}


def sanitize_tool_name(name: str) -> str:
    """Reduce *name* to ``[A-Za-z0-9_-]`` with no leading/trailing underscores."""
    cleaned = re.sub(r"[^A-Za-z0-9_-]+", "_", name.strip())
    cleaned = re.sub(r"_+", "_", cleaned)
    return cleaned.strip("_") or "operation"


def capitalize(text: str) -> str:
    """Upper-case the first character only (``pet`` -> ``Pet``, ``pET`` -> ``PET``)."""
    return text[:1].upper() + text[1:]


def ensure_action_oriented(operation_id: str, method: str) -> str:
    """Prefix a verb chosen by *method* unless *operation_id* starts with one.

    ``("pet", "GET")`` becomes ``getPet``; ``("listPets", "GET")`` is kept.
    Methods without a verb mapping (HEAD, OPTIONS, TRACE) keep the id.
    """
    lowered = operation_id.lower()
    if lowered.startswith(ACTION_VERBS):
        return operation_id
    verb = METHOD_VERBS.get(method.upper())
    if verb is None:
        return operation_id
    return verb + capitalize(operation_id)


def action_for(method: str) -> str:
    """Display verb for *method* (``Use`` for methods without one)."""
    return METHOD_ACTIONS.get(method.upper(), "Use")


def resource_from_path(path: str) -> str:
    """A readable resource phrase: ``/pets/{petId}`` -> ``pets specific petId``."""
    cleaned = path.strip("/")
    cleaned = re.sub(r"\{([^}]+)\}", r"specific \1", cleaned)
    cleaned = cleaned.replace("/", " ")
    return cleaned or "resource"


def tool_name_for(operation_id: str, method: str) -> str:
    """Sanitized, action-oriented tool name for an operation."""
    return ensure_action_oriented(sanitize_tool_name(operation_id), method)
