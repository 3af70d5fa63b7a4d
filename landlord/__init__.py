"""
Landlord
========

Multitenancy for FastAPI applications: resolves every request to a tenant,
binds the tenant's merged configuration (and optionally a database client)
to the request, and ships helpers for loading route modules and listing
routes.

Quick Start:
    from fastapi import FastAPI, Request
    from landlord import FileSystemProvider, InMemoryProvider, Landlord

    landlord = Landlord(providers=[
        InMemoryProvider({"name": "_default_", "config": {"features": {"beta": False}}}),
        FileSystemProvider("tenants/*.tenant.json"),
    ])

    app = FastAPI()
    landlord.install(app)

    @app.get("/")
    def index(request: Request):
        return request.state.tenant.config
"""

__version__ = "1.0.0"

from .exceptions import (
    AlreadyAttachedError,
    ConfigurationLoadError,
    InvalidArgumentError,
    InvalidTenantError,
    LandlordError,
    ModuleLoaderError,
    NoTenantsFoundError,
)
from .tenancy import (
    DEFAULT_TENANT_NAME,
    DatabaseOptions,
    Landlord,
    RequestOptions,
    Tenant,
    TenantBinder,
    TenantMiddleware,
    attach_databases,
    detach_databases,
    get_tenant,
    load_tenants,
)
from .providers import FileSystemProvider, InMemoryProvider, TenantProvider
from .routing import get_routes, load_routers, print_routes

__all__ = [
    # Core
    "Landlord",
    "Tenant",
    "DEFAULT_TENANT_NAME",
    "load_tenants",
    "attach_databases",
    "detach_databases",
    "DatabaseOptions",

    # Providers
    "TenantProvider",
    "FileSystemProvider",
    "InMemoryProvider",

    # Request binding
    "RequestOptions",
    "TenantBinder",
    "TenantMiddleware",
    "get_tenant",

    # Routing
    "load_routers",
    "get_routes",
    "print_routes",

    # Exceptions
    "LandlordError",
    "InvalidArgumentError",
    "NoTenantsFoundError",
    "AlreadyAttachedError",
    "InvalidTenantError",
    "ConfigurationLoadError",
    "ModuleLoaderError",

    "__version__",
]
