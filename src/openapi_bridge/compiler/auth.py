"""Map ``auth_<scheme>`` arguments onto request headers.

The mapping is driven by the scheme token alone, not by the declared
security scheme type.
"""

from __future__ import annotations


def auth_header(scheme: str, value: str) -> tuple[str, str]:
    """Return the ``(name, value)`` header for an ``auth_<scheme>`` argument.

    The scheme token is matched case-insensitively:

    - ``bearer`` / ``token``: ``Authorization: Bearer <value>``
    - ``basic``: ``Authorization: Basic <value>``
    - ``apikey``: ``X-API-Key: <value>``
    - anything else: a header named after the token, value as-is
    """
    token = scheme.lower()
    if token in ("bearer", "token"):
        return "Authorization", f"Bearer {value}"
    if token == "basic":
        return "Authorization", f"Basic {value}"
    if token == "apikey":
        return "X-API-Key", value
    return scheme, value
