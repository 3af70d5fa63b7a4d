"""
Tenant configuration provider interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..config.log_sink import LogSink
from ..tenancy.tenant import Tenant


class TenantProvider(ABC):
    """
    Interface for tenant configuration sources.

    Implementations validate their constructor arguments eagerly and return
    an empty list (after logging) when they find nothing to load.
    """

    @abstractmethod
    def load_tenants(self, log: Optional[LogSink] = None) -> List[Tenant]:
        """Load tenants in source order."""
        pass
