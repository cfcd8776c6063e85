"""Local ``$ref`` resolution for API descriptions."""

from __future__ import annotations

from typing import Any
from urllib.parse import unquote

from openapi_bridge.errors import ParseError


class RefResolver:
    """Inlines ``#/...`` references against the document they came from.

    Recursive schemas are cut at the second visit of the same reference on
    the current branch and replaced with a small placeholder object.
    """

    def __init__(self, document: dict[str, Any]) -> None:
        self._document = document

    def lookup(self, ref: str) -> Any:
        """Return the raw node a ``$ref`` string points at."""
        if not ref.startswith("#"):
            raise ParseError(f"Unsupported external reference: {ref}")
        node: Any = self._document
        pointer = ref[1:].lstrip("/")
        if not pointer:
            return node
        for token in pointer.split("/"):
            key = unquote(token).replace("~1", "/").replace("~0", "~")
            if isinstance(node, dict) and key in node:
                node = node[key]
            elif isinstance(node, list) and key.isdigit() and int(key) < len(node):
                node = node[int(key)]
            else:
                raise ParseError(f"Unresolvable reference: {ref}")
        return node

    def resolve(self, node: Any) -> Any:
        """Return a deep copy of *node* with every local reference inlined."""
        return self._resolve(node, ())

    def _resolve(self, node: Any, seen: tuple[str, ...]) -> Any:
        if isinstance(node, list):
            return [self._resolve(item, seen) for item in node]
        if not isinstance(node, dict):
            return node

        ref = node.get("$ref")
        if isinstance(ref, str):
            if ref in seen:
                return {
                    "type": "object",
                    "description": f"Recursive reference to {ref.rsplit('/', 1)[-1]}",
                }
            target = self._resolve(self.lookup(ref), (*seen, ref))
            siblings = {k: self._resolve(v, seen) for k, v in node.items() if k != "$ref"}
            if isinstance(target, dict) and siblings:
                return {**target, **siblings}
            return target

        return {key: self._resolve(value, seen) for key, value in node.items()}
