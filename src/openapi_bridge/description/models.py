"""Description models — operations, parameters and security metadata.

Everything here is built once by :func:`~openapi_bridge.description.index.build_index`
and is read-only afterwards.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ParameterLocation = Literal["path", "query", "header"]

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# ---------------------------------------------------------------------------
# Security
# ---------------------------------------------------------------------------


class SecurityScheme(_Frozen):
    """A reusable scheme from ``components.securitySchemes``."""

    type: str
    description: str = ""
    location: str | None = None  # apiKey: header / query / cookie
    name: str | None = None  # apiKey: the header or query parameter name
    scheme: str | None = None  # http: bearer / basic / ...


class SecurityRequirement(_Frozen):
    """One scheme named by an operation's effective ``security`` list."""

    scheme_name: str
    scopes: list[str] = []
    scheme: SecurityScheme | None = None


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


class ParameterSpec(_Frozen):
    """A declared path, query or header parameter."""

    name: str
    location: ParameterLocation
    required: bool = False
    schema_: dict[str, Any] = Field(default_factory=dict, alias="schema")
    description: str = ""


class RequestBodySpec(_Frozen):
    """A declared request body; the schema is passed through structurally."""

    content_type: str = "application/json"
    schema_: dict[str, Any] = Field(default_factory=dict, alias="schema")
    required: bool = False
    description: str = ""


class OperationSpec(_Frozen):
    """One HTTP method bound to one path."""

    operation_id: str
    method: str
    path: str
    parameters: list[ParameterSpec] = []
    request_body: RequestBodySpec | None = None
    security: list[SecurityRequirement] = []
    summary: str = ""
    description: str = ""
    tags: list[str] = []
    deprecated: bool = False
    external_docs: str = ""
    extensions: dict[str, Any] = {}

    def parameters_in(self, location: ParameterLocation) -> list[ParameterSpec]:
        """Return the declared parameters for *location*, in declaration order."""
        return [p for p in self.parameters if p.location == location]


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------


class DescriptionIndex(_Frozen):
    """The parsed description: operations plus document-level metadata."""

    title: str = "API"
    version: str = ""
    description: str = ""
    external_docs: str = ""
    servers: list[str] = []
    tag_descriptions: dict[str, str] = {}
    security_schemes: dict[str, SecurityScheme] = {}
    linked_data: Any = None
    operations: list[OperationSpec] = []

    def get(self, path: str, method: str) -> OperationSpec | None:
        """Look up the operation bound to *path* and *method*."""
        wanted = method.upper()
        for op in self.operations:
            if op.path == path and op.method == wanted:
                return op
        return None

    @property
    def default_server(self) -> str:
        """First declared server URL, or an empty string."""
        return self.servers[0] if self.servers else ""
