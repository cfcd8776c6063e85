"""Capability-oriented tool descriptions and the description content filter.

Descriptions are written for an agent deciding which tool to call. Text that
comes from the API description is untrusted and passes through
:func:`filter_text` before it is exposed; the fixed capability sentences do
not.
"""

from __future__ import annotations

import logging
import re

from openapi_bridge.description.models import DescriptionIndex, OperationSpec
from openapi_bridge.synthesis.naming import action_for, resource_from_path

logger = logging.getLogger(__name__)

FILTERED = "[FILTERED]"
FILTERED_CONTENT = "[FILTERED CONTENT]"

INJECTION_PATTERN = re.compile(
    r"(ignore|forget|disregard)\s+(all\s+)?(previous|earlier|above|prior)\s+instructions",
    re.IGNORECASE,
)
DENYLIST_PATTERN = re.compile(
    r"(ignore|bypass|hack|sql\s*inject(?:ion)?|xss|exploit|malicious|\bauth\b|\btoken\b|credentials?)",
    re.IGNORECASE,
)

CAPABILITIES = {
    "GET": (
        "Retrieves data without modifying resources. "
        "Use this when you need to fetch information or check the current state."
    ),
    "POST": (
        "Creates new resources or submits data. "
        "Use this when you need to add new items or send information to the server."
    ),
    "PUT": (
        "Updates or replaces existing resources. "
        "Use this when you need to update the entire resource with a complete replacement."
    ),
    "PATCH": (
        "Partially updates existing resources. "
        "Use this when you need to make partial updates to a resource."
    ),
    "DELETE": "Removes resources. Use this when you need to delete items or information.",
}

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


def filter_text(text: str) -> str:
    """Replace prompt-injection and credential-probing phrases."""
    filtered = INJECTION_PATTERN.sub(FILTERED_CONTENT, text)
    filtered = DENYLIST_PATTERN.sub(FILTERED, filtered)
    if filtered != text:
        logger.warning("Potentially unsafe content detected in description; filtered")
    return filtered


def capability_sentence(method: str) -> str:
    """The fixed sentence describing the class of effect *method* has."""
    return CAPABILITIES.get(method.upper(), "")


def describe_operation(op: OperationSpec, index: DescriptionIndex) -> str:
    """Compose the tool description for *op*."""
    action = action_for(op.method)
    resource = resource_from_path(op.path)
    sections: list[str] = [filter_text(op.summary or f"{action} {resource}")]

    if op.description:
        sections.append(filter_text(op.description))

    capability = capability_sentence(op.method)
    if capability:
        sections.append(f"Capability: {capability}")

    if op.tags:
        sections.append(filter_text(_domain_section(op.tags, index.tag_descriptions)))

    if op.external_docs:
        sections.append(filter_text(f"Additional Information: {op.external_docs}"))

    if op.parameters:
        sections.append(
            f"Usage Example:\n- To {action.lower()} {filter_text(resource)}, "
            "provide the required parameters."
        )

    body = op.request_body
    if op.method in BODY_METHODS and body is not None and _is_json(body.content_type):
        sections.append(
            "Body required for this operation. "
            "Provide all required fields in the body parameter."
        )

    if op.deprecated:
        sections.append(
            "WARNING: This operation is deprecated and may be removed in future versions."
        )

    return "\n\n".join(sections)


def _domain_section(tags: list[str], tag_descriptions: dict[str, str]) -> str:
    described = [f"- {tag}: {tag_descriptions[tag]}" for tag in tags if tag in tag_descriptions]
    if described:
        return "Domain:\n" + "\n".join(described)
    return "Domain: " + ", ".join(tags)


def _is_json(content_type: str) -> bool:
    return content_type == "application/json" or content_type.endswith("+json")
