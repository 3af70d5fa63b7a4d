"""
Tenant configuration providers.
"""

from .base import TenantProvider
from .file_system import FileSystemProvider
from .in_memory import InMemoryProvider

__all__ = [
    "TenantProvider",
    "FileSystemProvider",
    "InMemoryProvider",
]
