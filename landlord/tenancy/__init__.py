"""
Multi-Tenancy Module
====================

Tenant records, tenant resolution and request binding.
"""

from .tenant import DEFAULT_TENANT_NAME, Tenant
from .tenant_middleware import (
    RequestOptions, TenantBinder, TenantMiddleware, TenantResolutionStrategy,
    get_tenant, install_exception_handler, invalid_tenant_handler, tenant_dependency
)
from .landlord import (
    DatabaseOptions, Landlord, attach_databases, detach_databases, load_tenants
)

__all__ = [
    "DEFAULT_TENANT_NAME",
    "Tenant",
    "RequestOptions",
    "TenantBinder",
    "TenantMiddleware",
    "TenantResolutionStrategy",
    "get_tenant",
    "install_exception_handler",
    "invalid_tenant_handler",
    "tenant_dependency",
    "DatabaseOptions",
    "Landlord",
    "attach_databases",
    "detach_databases",
    "load_tenants",
]
