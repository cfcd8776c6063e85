"""openapi-bridge — expose an OpenAPI-described HTTP API as callable tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from openapi_bridge.bootstrap import create_registry as create_registry
    from openapi_bridge.config import BridgeConfig as BridgeConfig
    from openapi_bridge.registry import ToolRegistry as ToolRegistry

_EXPORTS = {
    "BridgeConfig": "openapi_bridge.config",
    "ToolRegistry": "openapi_bridge.registry",
    "create_registry": "openapi_bridge.bootstrap",
}


def __getattr__(name: str) -> object:
    module_path = _EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'openapi_bridge' has no attribute {name!r}")
