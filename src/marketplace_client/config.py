"""
Configuration models and loading for marketplace-client.
"""
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from .errors import ConfigError
from .types import Serializer

logger = logging.getLogger(__name__)
LOG_PREFIX = "[MarketplaceConfig]"

# Constants
DEFAULT_BASE_URL = "http://localhost:5012"
BASE_URL_ENV_KEYS = ["MARKETPLACE_API_BASE_URL", "NEXT_PUBLIC_API_BASE_URL"]
TIMEOUT_ENV_KEYS = ["MARKETPLACE_API_TIMEOUT"]
CONFIG_SECTION = "marketplace_client"

DEFAULT_TIMEOUT_CONNECT = 5.0
DEFAULT_TIMEOUT_READ = 30.0
DEFAULT_TIMEOUT_WRITE = 10.0


def _env_setting(keys: List[str]) -> Optional[str]:
    """First non-empty environment variable among ``keys``."""
    for key in keys:
        value = os.environ.get(key)
        if value:
            return value
    return None


def _parse_timeout(value: Any, source: str) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"{LOG_PREFIX} Ignoring invalid timeout {value!r} from {source}")
        return None


class TimeoutConfig(BaseModel):
    """Timeout configuration."""
    connect: float = DEFAULT_TIMEOUT_CONNECT
    read: float = DEFAULT_TIMEOUT_READ
    write: float = DEFAULT_TIMEOUT_WRITE
    pool: Optional[float] = None


class DefaultSerializer:
    """Default JSON serializer."""
    def serialize(self, data: Any) -> str:
        return json.dumps(data)

    def deserialize(self, data: str) -> Any:
        return json.loads(data)


class ClientConfig(BaseModel):
    """Client configuration."""
    model_config = {"arbitrary_types_allowed": True}

    base_url: str = DEFAULT_BASE_URL
    timeout: Optional[Union[float, TimeoutConfig]] = None
    headers: Dict[str, str] = Field(default_factory=dict)

    # Optional pre-configured client (httpx)
    httpx_client: Any = None

    # Custom serializer
    serializer: Optional[Serializer] = None

    @field_validator("base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")

    @classmethod
    def from_env(
        cls,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        file_config: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> "ClientConfig":
        """
        Build a config from argument -> environment -> config file -> default.

        Empty environment variables count as unset. An unparsable timeout is
        logged and skipped in favour of the next source.
        """
        file_config = file_config or {}

        resolved_url = (
            base_url
            or _env_setting(BASE_URL_ENV_KEYS)
            or file_config.get("base_url")
            or DEFAULT_BASE_URL
        )

        resolved_timeout = _parse_timeout(timeout, "argument")
        if resolved_timeout is None:
            resolved_timeout = _parse_timeout(_env_setting(TIMEOUT_ENV_KEYS), "environment")
        if resolved_timeout is None:
            resolved_timeout = _parse_timeout(file_config.get("timeout"), "config file")

        headers = kwargs.pop("headers", None)
        if headers is None:
            headers = file_config.get("headers")
        logger.debug(f"{LOG_PREFIX} from_env: base_url={resolved_url}, timeout={resolved_timeout}")
        return cls(
            base_url=resolved_url,
            timeout=resolved_timeout,
            headers=headers or {},
            **kwargs,
        )

    @classmethod
    def from_file(cls, path: str, **kwargs: Any) -> "ClientConfig":
        """Build a config from a YAML file; arguments and env still take priority."""
        return cls.from_env(file_config=load_config_file(path), **kwargs)


def load_config_file(path: str) -> Dict[str, Any]:
    """
    Read the client section of a YAML config file.

    The file may hold the settings at the top level or under a
    ``marketplace_client`` key.
    """
    if not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    section = data.get(CONFIG_SECTION, data)
    if not isinstance(section, dict):
        raise ConfigError(f"'{CONFIG_SECTION}' in {path} must be a mapping")

    logger.debug(f"{LOG_PREFIX} Loaded config file {path} (keys={sorted(section)})")
    return section


def normalize_timeout(timeout: Optional[Union[float, TimeoutConfig]]) -> TimeoutConfig:
    """Normalize timeout to TimeoutConfig object."""
    if timeout is None:
        return TimeoutConfig()
    if isinstance(timeout, (int, float)):
        return TimeoutConfig(connect=float(timeout), read=float(timeout), write=float(timeout))
    return timeout


@dataclass
class ResolvedConfig:
    """Fully resolved configuration ready for usage."""
    base_url: str
    timeout: TimeoutConfig
    headers: Dict[str, str]
    serializer: Serializer


def resolve_config(config: ClientConfig) -> ResolvedConfig:
    """Apply defaults and return resolved config."""
    return ResolvedConfig(
        base_url=config.base_url,
        timeout=normalize_timeout(config.timeout),
        headers=config.headers,
        serializer=config.serializer or DefaultSerializer()
    )
