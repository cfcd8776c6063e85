"""HttpDispatcher — send a CompiledRequest and normalize the outcome.

Every transport failure and every backend status becomes a
:class:`~openapi_bridge.models.ToolResult`; nothing but cancellation
escapes :meth:`HttpDispatcher.execute`.
"""

from __future__ import annotations

import logging
import socket
from typing import TYPE_CHECKING, Any

import httpx

from openapi_bridge import __version__
from openapi_bridge.dispatch.formatting import format_response, is_success
from openapi_bridge.errors import BackendError, InvalidURLError, TransportError
from openapi_bridge.models import ToolResult
from openapi_bridge.utils.telemetry import ATTR_HTTP_STATUS_CODE, set_current_attribute

if TYPE_CHECKING:
    from openapi_bridge.config import BridgeConfig
    from openapi_bridge.models import CompiledRequest

logger = logging.getLogger(__name__)

USER_AGENT = f"openapi-bridge/{__version__}"

_RESOLVER_MESSAGES = (
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "getaddrinfo failed",
    "no address associated with hostname",
)


class HttpDispatcher:
    """Performs compiled requests against the backend.

    A fresh :class:`httpx.AsyncClient` is opened per call and closed on
    exit, including on cancellation. Pass *transport* to route requests
    somewhere other than the network (tests use :class:`httpx.MockTransport`).
    """

    def __init__(
        self,
        config: BridgeConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport

    @property
    def config(self) -> BridgeConfig:
        return self._config

    def build_headers(self, request: CompiledRequest) -> list[tuple[str, str]]:
        """Static headers followed by the compiled ones.

        A compiled header drops every static header of the same name.
        """
        static: list[tuple[str, str]] = [
            ("Accept", "application/json"),
            ("User-Agent", USER_AGENT),
        ]
        for name, value in self._config.additional_headers.items():
            logger.debug("Adding additional header %s", name)
            static.append((name, value))
        overridden = {name.lower() for name, _ in request.headers}
        kept = [(name, value) for name, value in static if name.lower() not in overridden]
        return kept + list(request.headers)

    async def execute(
        self,
        request: CompiledRequest,
        *,
        operation_id: str,
        path: str,
        timeout: float | None = None,
    ) -> ToolResult:
        """Send *request* and return the formatted result."""
        effective_timeout = timeout if timeout is not None else self._config.request_timeout
        logger.info("%s %s", request.method, request.url)
        try:
            async with httpx.AsyncClient(
                timeout=effective_timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    request.method,
                    request.url,
                    headers=self.build_headers(request),
                    content=request.body,
                )
        except httpx.InvalidURL as exc:
            error = InvalidURLError(request.url, str(exc))
            logger.error("%s", error)
            return ToolResult.error(str(error))
        except httpx.TimeoutException as exc:
            return self._transport_failure(
                TransportError("timeout", request.url, str(exc)),
                f"Timeout error: No response from {request.url} within "
                f"{effective_timeout:g}s. Error: {exc}",
            )
        except httpx.ConnectError as exc:
            if _is_dns_failure(exc):
                return self._transport_failure(
                    TransportError("dns", request.url, str(exc)),
                    f"Unknown host: Cannot resolve hostname in {request.url}. "
                    f"Please check if the URL is correct. Error: {exc}",
                )
            return self._transport_failure(
                TransportError("connect", request.url, str(exc)),
                f"Connection error: Cannot connect to {request.url}. Please check "
                f"if the URL is correct and the server is running. Error: {exc}",
            )
        except httpx.HTTPError as exc:
            return self._transport_failure(
                TransportError("transport", request.url, str(exc)),
                f"Transport error: Request to {request.url} failed. Error: {exc}",
            )
        except Exception as exc:
            logger.exception("Request to %s failed", request.url)
            return ToolResult.error(f"Error: Request to {request.url} failed. Error: {exc}")

        return self._to_result(response, operation_id=operation_id, method=request.method, path=path)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _transport_failure(error: TransportError, message: str) -> ToolResult:
        logger.error("%s", error)
        return ToolResult.error(message)

    @staticmethod
    def _to_result(
        response: httpx.Response,
        *,
        operation_id: str,
        method: str,
        path: str,
    ) -> ToolResult:
        status = response.status_code
        body = response.text
        set_current_attribute(ATTR_HTTP_STATUS_CODE, status)
        logger.info("Received status %d, body length %d", status, len(body))

        failed = not is_success(status)
        if failed:
            logger.error("%s for %s %s", BackendError(status, body), method, path)

        metadata: dict[str, Any] = {
            "statusCode": status,
            "operation": operation_id,
            "method": method,
            "path": path,
        }
        if response.headers:
            metadata["headers"] = {
                name: ", ".join(response.headers.get_list(name))
                for name in response.headers.keys()
            }
        result = ToolResult.from_text(format_response(body, status), is_error=failed)
        return result.with_metadata(metadata)


def _is_dns_failure(exc: BaseException) -> bool:
    """Walk the cause chain looking for a resolver failure."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, socket.gaierror):
            return True
        message = str(current).lower()
        if any(marker in message for marker in _RESOLVER_MESSAGES):
            return True
        current = current.__cause__ or current.__context__
    return False
