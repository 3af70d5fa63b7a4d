"""
Landlord Exceptions
===================

Error taxonomy shared by the tenant resolution engine, the configuration
providers and the request binding middleware.

Construction and load errors are raised straight to the caller so that the
application aborts startup. ``InvalidTenantError`` is the only request-time
error and is converted into a 403 response at the request boundary.
"""

from typing import Optional


class LandlordError(Exception):
    """Base exception for landlord operations."""

    def __init__(self, message: str, original_error: Optional[Exception] = None, **kwargs):
        super().__init__(message)
        self.original_error = original_error
        self.metadata = kwargs


class InvalidArgumentError(LandlordError, ValueError):
    """Exception raised for missing or malformed construction parameters."""
    pass


class NoTenantsFoundError(LandlordError):
    """Exception raised when no provider produced a tenant."""
    pass


class AlreadyAttachedError(LandlordError):
    """Exception raised when a database or a landlord is attached twice."""
    pass


class ConfigurationLoadError(LandlordError):
    """Exception raised when a tenant configuration file cannot be loaded."""

    def __init__(self, message: str, path: Optional[str] = None,
                 original_error: Optional[Exception] = None, **kwargs):
        super().__init__(message, original_error, **kwargs)
        self.path = path


class ModuleLoaderError(LandlordError):
    """Exception raised when route modules cannot be discovered or imported."""
    pass


class InvalidTenantError(LandlordError):
    """
    Exception raised when a request cannot be matched to a tenant.

    Not fatal to the process; surfaced to the client as a 403.
    """

    status_code = 403
    detail = "Invalid tenant."

    def __init__(self, key: Optional[str] = None, message: Optional[str] = None, **kwargs):
        super().__init__(message or self.detail, **kwargs)
        self.key = key
