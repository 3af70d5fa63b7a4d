"""
Landlord Settings
=================

Application-level settings for wiring landlord into a service: where tenant
configuration files live, how requests are mapped to tenants and where the
database settings sit inside a tenant config.

Settings are read from an optional YAML file and environment variables;
environment variables take precedence over the file.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..exceptions import ConfigurationLoadError, InvalidArgumentError
from .merge import set_path

logger = logging.getLogger(__name__)

ENV_OVERRIDES = {
    "tenant_globs": "LANDLORD_TENANT_GLOBS",
    "tenant_cwd": "LANDLORD_TENANT_CWD",
    "tenant_header": "LANDLORD_TENANT_HEADER",
    "request_path": "LANDLORD_REQUEST_PATH",
    "db_config_path": "LANDLORD_DB_CONFIG_PATH",
    "log_level": "LANDLORD_LOG_LEVEL",
}

LIST_SETTINGS = ("tenant_globs", "tenant_ignore")


@dataclass
class LandlordSettings:
    """Settings for a landlord deployment."""
    tenant_globs: List[str] = field(default_factory=lambda: ["tenants/*.tenant.*"])
    tenant_cwd: Optional[str] = None
    tenant_ignore: List[str] = field(default_factory=list)

    # Request binding
    request_path: str = "tenant"
    tenant_header: Optional[str] = None

    # Database attachment
    db_config_path: Optional[str] = None

    log_level: str = "INFO"

    def __post_init__(self):
        """Validate settings."""
        for name in LIST_SETTINGS:
            value = getattr(self, name)
            if isinstance(value, str):
                setattr(self, name, _split_list(value))

        if not self.tenant_globs:
            raise InvalidArgumentError("At least one tenant glob is required")
        if not self.request_path:
            raise InvalidArgumentError("request_path must not be empty")
        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise InvalidArgumentError(f"Invalid log level: {self.log_level}")

        self.log_level = self.log_level.upper()


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _merge_environment_variables(config_data: Dict[str, Any],
                                 environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Merge environment variables with configuration data."""
    environ = os.environ if environ is None else environ

    for config_path, env_var in ENV_OVERRIDES.items():
        env_value = environ.get(env_var)
        if env_value:
            set_path(config_data, config_path, env_value)

    return config_data


def load_settings(path: Optional[Union[str, Path]] = None,
                  environ: Optional[Dict[str, str]] = None) -> LandlordSettings:
    """
    Load settings from a YAML file and the environment.

    Args:
        path: Optional YAML file. Without it only defaults and environment
            variables are used.
        environ: Environment mapping, defaults to ``os.environ``.

    Raises:
        ConfigurationLoadError: If the file cannot be read or parsed.
        InvalidArgumentError: If the resulting settings are invalid.
    """
    config_data: Dict[str, Any] = {}

    if path is not None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load settings: {e}")
            raise ConfigurationLoadError(f"Failed to load settings from {path}: {e}",
                                         path=str(path), original_error=e) from e

        if not isinstance(config_data, dict):
            raise ConfigurationLoadError(f"Settings file {path} must contain a mapping",
                                         path=str(path))

    config_data = _merge_environment_variables(config_data, environ)

    known = LandlordSettings.__dataclass_fields__
    unknown = sorted(set(config_data) - set(known))
    if unknown:
        logger.warning(f"Ignoring unknown settings: {', '.join(unknown)}")

    settings = LandlordSettings(**{k: v for k, v in config_data.items() if k in known})
    logger.info(f"Settings loaded{f' from {path}' if path else ''}")
    return settings
