"""
Tenant Middleware and Request Binding
=====================================

Maps every incoming request to a tenant and exposes that tenant on the
request state (``request.state.tenant`` by default).

Features:
- Lookup by host name (default) or by a configured request header
- 403 response for requests that do not match a tenant
- FastAPI dependency and exception handler for tenant-aware routes
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Union

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Receive, Scope, Send

from ..exceptions import InvalidArgumentError, InvalidTenantError
from .tenant import Tenant

logger = logging.getLogger(__name__)

# Policy violation
WS_CLOSE_INVALID_TENANT = 1008


class TenantResolutionStrategy(Enum):
    """Strategies for deriving the tenant lookup key from a request."""
    HOST = "host"
    HEADER = "header"


@dataclass
class RequestOptions:
    """Configuration for binding tenants to requests."""
    # Attribute name on ``request.state``
    path: str = "tenant"
    # Header holding the tenant name; the host name is used when unset
    tenant_header: Optional[str] = None

    def __post_init__(self):
        if not self.path:
            self.path = "tenant"

    @classmethod
    def from_value(cls, value: Union["RequestOptions", Mapping[str, Any], None]) -> "RequestOptions":
        if isinstance(value, RequestOptions):
            return value
        if not value:
            return cls()
        return cls(
            path=value.get("path") or "tenant",
            tenant_header=value.get("tenant_header", value.get("tenantHeader"))
        )

    @property
    def strategy(self) -> TenantResolutionStrategy:
        if self.tenant_header:
            return TenantResolutionStrategy.HEADER
        return TenantResolutionStrategy.HOST


def hostname_from_host(host: Optional[str]) -> Optional[str]:
    """Strip the port from a ``Host`` header value and lowercase it."""
    if not host:
        return None

    host = host.strip().lower()
    if host.startswith("["):
        end = host.find("]")
        return host[:end + 1] if end != -1 else host

    return host.split(":", 1)[0]


class TenantBinder:
    """
    Per-request tenant lookup.

    ``tenants`` is replaced as a whole on reload and never edited in place,
    so concurrent lookups always see a complete collection.
    """

    def __init__(self, tenants: Mapping[str, Tenant], options: Optional[RequestOptions] = None):
        if tenants is None:
            raise InvalidArgumentError("TenantBinder: missing tenants")

        self.tenants = tenants
        self.options = options or RequestOptions()

    def resolve_key(self, headers: Mapping[str, str],
                    server_host: Optional[str] = None) -> Optional[str]:
        """Derive the tenant lookup key from request headers."""
        if not isinstance(headers, Headers):
            headers = Headers(headers=dict(headers))

        if self.options.strategy == TenantResolutionStrategy.HEADER:
            value = headers.get(self.options.tenant_header)
            return value.strip() if value else None

        return hostname_from_host(headers.get("host") or server_host)

    def bind(self, headers: Mapping[str, str], server_host: Optional[str] = None) -> Tenant:
        """
        Find the tenant for a request.

        Raises:
            InvalidTenantError: If no tenant matches the lookup key.
        """
        key = self.resolve_key(headers, server_host)
        tenant = self.tenants.get(key) if key else None
        if tenant is None:
            raise InvalidTenantError(key=key)
        return tenant

    def __call__(self, request: Request) -> Tenant:
        """Bind the tenant of a FastAPI request onto its state."""
        server = request.scope.get("server")
        tenant = self.bind(request.headers, server[0] if server else None)
        setattr(request.state, self.options.path, tenant)
        return tenant


class TenantMiddleware:
    """
    ASGI middleware binding a tenant to every HTTP and WebSocket request.

    Requests that do not match a tenant are answered with a 403 and never
    reach the application.
    """

    def __init__(self, app: ASGIApp, binder: TenantBinder):
        self.app = app
        self.binder = binder

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        server = scope.get("server")
        try:
            tenant = self.binder.bind(Headers(scope=scope), server[0] if server else None)
        except InvalidTenantError as e:
            logger.warning(f"Rejected request for unknown tenant {e.key!r} ({scope.get('path', '')})")
            if scope["type"] == "websocket":
                await send({"type": "websocket.close", "code": WS_CLOSE_INVALID_TENANT})
                return
            response = JSONResponse(status_code=e.status_code, content={"detail": e.detail})
            await response(scope, receive, send)
            return

        scope.setdefault("state", {})[self.binder.options.path] = tenant
        await self.app(scope, receive, send)


def tenant_dependency(path: str = "tenant") -> Callable[[Request], Tenant]:
    """Create a FastAPI dependency returning the tenant bound under ``path``."""

    def dependency(request: Request) -> Tenant:
        tenant = getattr(request.state, path, None)
        if tenant is None:
            raise InvalidTenantError(message="Tenant context required but not provided")
        return tenant

    return dependency


get_tenant = tenant_dependency()


async def invalid_tenant_handler(request: Request, exc: InvalidTenantError) -> JSONResponse:
    """Convert ``InvalidTenantError`` into a 403 response."""
    logger.warning(f"Invalid tenant for {request.url.path}: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def install_exception_handler(app) -> None:
    app.add_exception_handler(InvalidTenantError, invalid_tenant_handler)
