"""
In-memory tenant provider.

Used to configure tenants directly in code, e.g. a global ``_default_``
tenant shared by every file-based tenant.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from ..config.log_sink import LogSink, resolve_log_sink
from ..exceptions import InvalidArgumentError
from ..tenancy.tenant import Tenant
from .base import TenantProvider

logger = logging.getLogger(__name__)

TenantData = Mapping[str, Any]


class InMemoryProvider(TenantProvider):
    """Provider returning tenants supplied as ``{"name": ..., "config": ...}`` data."""

    def __init__(self, tenants: Union[TenantData, Iterable[TenantData], None]):
        if tenants is None:
            raise InvalidArgumentError("InMemoryProvider: missing tenants")

        if isinstance(tenants, Mapping):
            self._data: List[TenantData] = [tenants]
        else:
            self._data = list(tenants)

    def load_tenants(self, log: Optional[LogSink] = None) -> List[Tenant]:
        """
        Create tenants from the supplied data.

        Raises:
            InvalidArgumentError: If an entry is missing its name or config.
        """
        log = resolve_log_sink(log)

        if not self._data:
            log("InMemoryProvider: no data has been supplied.")

        tenants = []
        for index, tenant_data in enumerate(self._data):
            if not isinstance(tenant_data, Mapping):
                raise InvalidArgumentError(
                    f"InMemoryProvider: entry {index} is not a mapping", index=index
                )

            name = tenant_data.get("name")
            config = tenant_data.get("config")
            if not name or not config:
                raise InvalidArgumentError(
                    f"InMemoryProvider: entry {index} is missing tenant name or config",
                    index=index
                )

            log(f"InMemoryProvider: found {name} ...")
            tenants.append(Tenant(name, config))
            log(f"InMemoryProvider: created {name}")

        return tenants
