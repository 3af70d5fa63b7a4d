"""
Tenant Resolution
=================

Loads tenant configurations from one or more providers, merges them into a
single collection keyed by tenant name and binds tenant databases to that
collection.

Merge rules:
- Providers load in the order supplied. A tenant appearing in more than one
  provider is layered on top of the earlier one; the later provider wins.
- A ``_default_`` tenant, when present, is applied beneath every other tenant;
  values set on the tenant win over the defaults.

The two rules deliberately merge in opposite directions.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Union

from ..config.log_sink import LogSink, resolve_log_sink
from ..config.merge import PathExpression, get_path
from ..config.settings import LandlordSettings
from ..exceptions import AlreadyAttachedError, InvalidArgumentError, NoTenantsFoundError
from ..providers.base import TenantProvider
from ..providers.file_system import FileSystemProvider
from .tenant import DEFAULT_TENANT_NAME, DatabaseFactory, DatabaseFinalizer, Tenant
from .tenant_middleware import RequestOptions, TenantBinder, TenantMiddleware, install_exception_handler

logger = logging.getLogger(__name__)

Providers = Union[TenantProvider, Sequence[TenantProvider]]
TenantCollection = Mapping[str, Tenant]


@dataclass
class DatabaseOptions:
    """How to open and close tenant databases."""
    factory: Optional[DatabaseFactory] = None
    finalizer: Optional[DatabaseFinalizer] = None
    config_path: Optional[PathExpression] = None

    @classmethod
    def from_value(cls, value: Union["DatabaseOptions", Mapping[str, Any], None]) -> Optional["DatabaseOptions"]:
        if value is None or isinstance(value, DatabaseOptions):
            return value
        return cls(
            factory=value.get("factory"),
            finalizer=value.get("finalizer"),
            config_path=value.get("config_path", value.get("configPath"))
        )

    def is_complete(self) -> bool:
        return bool(self.factory and self.finalizer and self.config_path)


def _normalize_providers(providers: Optional[Providers]) -> Sequence[TenantProvider]:
    if not providers:
        raise InvalidArgumentError("Missing providers")

    if isinstance(providers, (list, tuple)):
        provider_list = list(providers)
    else:
        provider_list = [providers]

    if not provider_list:
        raise InvalidArgumentError("Missing providers")

    for index, provider in enumerate(provider_list):
        if not isinstance(provider, TenantProvider):
            raise InvalidArgumentError(
                f"Provider {index} ({type(provider).__name__}) does not implement TenantProvider",
                index=index
            )

    return provider_list


def load_tenants(providers: Providers, log: Optional[LogSink] = None) -> TenantCollection:
    """
    Load and merge tenants from the given providers.

    Args:
        providers: One provider or a list of providers, in precedence order.
        log: Sink for progress messages.

    Returns:
        Read-only mapping of tenant name to tenant.

    Raises:
        InvalidArgumentError: If no providers are given or one does not
            implement ``TenantProvider``.
        NoTenantsFoundError: If the providers produced no tenants.
    """
    log = resolve_log_sink(log)
    provider_list = _normalize_providers(providers)

    tenants: Dict[str, Tenant] = {}

    for provider in provider_list:
        for tenant in provider.load_tenants(log):
            existing = tenants.get(tenant.name)
            if existing is not None:
                tenant.apply_defaults(existing.config)
                tenants[tenant.name] = tenant
                log(f"landlord: Merged configurations from multiple providers {tenant.name}.")
                continue

            tenants[tenant.name] = tenant
            log(f"landlord: Loaded {tenant.name}.")

    if not tenants:
        raise NoTenantsFoundError("No tenant configurations were found")

    default_tenant = tenants.get(DEFAULT_TENANT_NAME)
    if default_tenant is not None:
        log("landlord: Found defaults ...")
        for tenant in tenants.values():
            if not tenant.is_default:
                tenant.apply_defaults(default_tenant.config)
        log("landlord: Defaults applied.")

    logger.info(f"Loaded {len(tenants)} tenants")
    return MappingProxyType(tenants)


def attach_databases(tenants: TenantCollection,
                     db: Union[DatabaseOptions, Mapping[str, Any], None],
                     log: Optional[LogSink] = None):
    """
    Attach a database to every tenant that has connection settings.

    Tenants without a value at ``db.config_path`` are skipped. Nothing is
    attached unless factory, finalizer and config path are all supplied.
    """
    log = resolve_log_sink(log)
    options = DatabaseOptions.from_value(db)

    if options is None or not options.is_complete():
        log("landlord: Database connectivity was skipped.")
        return

    for tenant in tenants.values():
        log(f"landlord: Attaching {tenant.name} ...")
        db_config = get_path(tenant.config, options.config_path)
        if db_config is not None:
            tenant.attach_database(options.factory, options.finalizer, db_config)
            log(f"landlord: Attached {tenant.name}.")
        else:
            log(f"landlord: Skipped {tenant.name} (no db config).")


def detach_databases(tenants: TenantCollection,
                     log: Optional[LogSink] = None) -> Dict[str, Exception]:
    """
    Detach the databases of every tenant.

    A failing finalizer does not stop the remaining tenants from being
    cleaned up.

    Returns:
        Finalizer errors keyed by tenant name.
    """
    log = resolve_log_sink(log)
    failures: Dict[str, Exception] = {}

    log("landlord: Cleaning up...")
    for tenant in tenants.values():
        log(f"landlord: Cleaning up {tenant.name} ...")
        try:
            tenant.detach_database()
        except Exception as e:
            failures[tenant.name] = e
            logger.error(f"Failed to detach database for tenant {tenant.name}: {e}", exc_info=True)
            log(f"landlord: Failed to clean {tenant.name}: {e}")
            continue
        log(f"landlord: Cleaned {tenant.name}.")

    if failures:
        log(f"landlord: Cleaned up with {len(failures)} failures.")
    else:
        log("landlord: All cleaned up.")
    return failures


class Landlord:
    """
    Multitenancy for FastAPI applications.

    Loads the tenants, attaches their databases and produces the per-request
    binder installed as middleware.

    Example:
        landlord = Landlord(
            providers=FileSystemProvider("tenants/*.tenant.json"),
            db=DatabaseOptions(factory=connect, finalizer=close,
                               config_path="environment.database"),
        )
        landlord.install(app)
        ...
        landlord.cleanup()
    """

    def __init__(self, providers: Providers,
                 db: Union[DatabaseOptions, Mapping[str, Any], None] = None,
                 req: Union[RequestOptions, Mapping[str, Any], None] = None,
                 log: Optional[LogSink] = None):
        self.providers = _normalize_providers(providers)
        self.db = DatabaseOptions.from_value(db)
        self.req = RequestOptions.from_value(req)
        self.log = resolve_log_sink(log)

        self._tenants: TenantCollection = MappingProxyType({})
        self._binder: Optional[TenantBinder] = None
        self._active = False

    @classmethod
    def from_settings(cls, settings: LandlordSettings, db_factory: Optional[DatabaseFactory] = None,
                      db_finalizer: Optional[DatabaseFinalizer] = None,
                      log: Optional[LogSink] = None,
                      providers: Iterable[TenantProvider] = ()) -> "Landlord":
        """
        Build a landlord from ``LandlordSettings``.

        Extra ``providers`` are loaded before the file-system provider, so
        file values override them.
        """
        file_provider = FileSystemProvider(
            settings.tenant_globs,
            {"cwd": settings.tenant_cwd, "ignore": settings.tenant_ignore}
        )
        return cls(
            providers=[*providers, file_provider],
            db=DatabaseOptions(db_factory, db_finalizer, settings.db_config_path),
            req=RequestOptions(path=settings.request_path, tenant_header=settings.tenant_header),
            log=log
        )

    @property
    def tenants(self) -> TenantCollection:
        return self._tenants

    def use(self) -> TenantBinder:
        """
        Load tenants, attach databases and return the request binder.

        Tenants are kept even when attaching fails, so ``cleanup()`` can close
        the databases that were opened.

        Raises:
            AlreadyAttachedError: If called again before ``cleanup()``.
        """
        if self._active:
            raise AlreadyAttachedError("Landlord is already in use; call cleanup() first")

        tenants = load_tenants(self.providers, self.log)
        self._tenants = tenants
        self._active = True
        attach_databases(tenants, self.db, self.log)

        self._binder = TenantBinder(tenants, self.req)
        return self._binder

    def install(self, app) -> TenantBinder:
        """Bind tenants to every request handled by a FastAPI app."""
        binder = self.use()
        app.add_middleware(TenantMiddleware, binder=binder)
        install_exception_handler(app)
        return binder

    def reload(self) -> TenantCollection:
        """
        Reload tenants and swap them in.

        The new collection is fully built before the binder sees it. The
        previous collection's databases are detached afterwards.
        """
        tenants = load_tenants(self.providers, self.log)
        try:
            attach_databases(tenants, self.db, self.log)
        except Exception:
            detach_databases(tenants, self.log)
            raise

        previous = self._tenants
        self._tenants = tenants
        if self._binder is not None:
            self._binder.tenants = tenants

        if previous:
            detach_databases(previous, self.log)
        logger.info("Tenants reloaded")
        return tenants

    def cleanup(self) -> Dict[str, Exception]:
        """Close tenant database connections."""
        self._active = False
        if not self._tenants:
            return {}
        return detach_databases(self._tenants, self.log)
