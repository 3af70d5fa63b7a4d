"""
File-system tenant provider.

Loads one tenant per configuration file. Files follow the naming convention
``<tenant-name>.tenant.<ext>``; ``_default_.tenant.<ext>`` holds the defaults
applied to every other tenant.
"""

import logging
from typing import Any, List, Mapping, Optional, Union

from ..config.loader import GlobOptions, GlobPatterns, load_structured_file, resolve_globs
from ..config.log_sink import LogSink, resolve_log_sink
from ..exceptions import InvalidArgumentError
from ..tenancy.tenant import Tenant
from .base import TenantProvider

logger = logging.getLogger(__name__)

TENANT_SUFFIX = ".tenant"


def tenant_name_from_file(name: str) -> str:
    """Derive the tenant name from a file name stripped of its extension."""
    tenant = name.lower()
    if tenant.endswith(TENANT_SUFFIX):
        tenant = tenant[:-len(TENANT_SUFFIX)]
    return tenant


class FileSystemProvider(TenantProvider):
    """Provider loading tenant configs from files matched by glob patterns."""

    def __init__(self, globs: GlobPatterns,
                 glob_options: Union[GlobOptions, Mapping[str, Any], None] = None):
        if not globs:
            raise InvalidArgumentError("FileSystemProvider: missing globs")

        self.globs = globs
        self.glob_options = GlobOptions.from_value(glob_options)

    def load_tenants(self, log: Optional[LogSink] = None) -> List[Tenant]:
        """
        Load every matching file as a tenant.

        Raises:
            ConfigurationLoadError: If a matched file cannot be parsed.
            InvalidArgumentError: If a file holds an empty configuration.
        """
        log = resolve_log_sink(log)
        files = resolve_globs(self.globs, self.glob_options)

        if not files:
            log("FileSystemProvider: no files found matching the supplied pattern.")

        tenants = []
        for resolved in files:
            name = tenant_name_from_file(resolved.name)
            log(f"FileSystemProvider: found {resolved.full_path} ...")
            tenants.append(Tenant(name, load_structured_file(resolved.full_path)))
            log(f"FileSystemProvider: created {name}")

        return tenants
