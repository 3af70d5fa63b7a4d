"""
Tenant Record
=============

A single tenant: its name, its merged configuration and an optional database
handle bound to the tenant's lifecycle.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

from ..config.merge import deep_merge
from ..exceptions import AlreadyAttachedError, InvalidArgumentError

logger = logging.getLogger(__name__)

DEFAULT_TENANT_NAME = "_default_"

DatabaseFactory = Callable[[Any], Any]
DatabaseFinalizer = Callable[[Any], Any]


@dataclass
class Tenant:
    """
    Tenant entity.

    ``config`` is replaced, never edited in place, by ``apply_defaults``.
    The database handle can only be attached once per attach/detach cycle.
    """
    name: str
    config: Dict[str, Any]

    _db: Any = field(default=None, init=False, repr=False, compare=False)
    _db_finalizer: Optional[DatabaseFinalizer] = field(default=None, init=False,
                                                       repr=False, compare=False)

    def __post_init__(self):
        if not self.name or not isinstance(self.name, str):
            raise InvalidArgumentError("Missing tenant configuration: tenant name is required")
        if not self.config or not isinstance(self.config, Mapping):
            raise InvalidArgumentError(
                f"Missing tenant configuration: config for {self.name} must be a non-empty mapping"
            )
        self.config = dict(self.config)

    @property
    def db(self) -> Any:
        """Database handle bound to the tenant, or ``None``."""
        return self._db

    @property
    def is_default(self) -> bool:
        return self.name == DEFAULT_TENANT_NAME

    def apply_defaults(self, default_config: Optional[Mapping[str, Any]]):
        """
        Layer the tenant config on top of ``default_config``.

        Values already set on the tenant win over the defaults; the defaults
        only fill in missing keys.
        """
        self.config = deep_merge(default_config, self.config)

    def attach_database(self, factory: DatabaseFactory, finalizer: DatabaseFinalizer,
                        db_config: Any):
        """
        Attach a database client to the tenant.

        Args:
            factory: Returns a database client for ``db_config``. Called
                synchronously; asynchronous clients must return immediately.
            finalizer: Receives the client on detach and cleans it up.
            db_config: Connection settings passed to ``factory``.

        Raises:
            AlreadyAttachedError: If a database is already attached.
        """
        if self._db is not None:
            raise AlreadyAttachedError(f"Database already attached to tenant {self.name}",
                                       tenant=self.name)

        self._db = factory(db_config)
        self._db_finalizer = finalizer
        logger.debug(f"Attached database to tenant {self.name}")

    def detach_database(self):
        """
        Call the finalizer with the attached database and clear the handle.

        The handle is cleared even if the finalizer raises; the finalizer
        error is re-raised to the caller.
        """
        db, finalizer = self._db, self._db_finalizer
        try:
            if db is not None and finalizer is not None:
                finalizer(db)
        finally:
            self._db = None
            self._db_finalizer = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert tenant to dictionary."""
        return {
            "name": self.name,
            "config": self.config,
            "has_db": self._db is not None
        }
