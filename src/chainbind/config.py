"""
Configuration for chainbind.

Holds the provider endpoint used to build the default transport and the
event listener timeout used by transaction subscriptions. A process-wide
configuration is kept by set_config()/get_config(); contracts and
transports read it when no explicit value is passed.

Example:
    ```python
    from chainbind.config import set_config

    set_config({
        "provider": {
            "json_rpc": {"url": "http://localhost", "port": 8545},
            "polling_interval_ms": 50,
        },
        "events": {"timeout_ms": 2000},
    })
    ```
"""

from __future__ import annotations

import os
from typing import Any, Dict, Literal, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from chainbind.errors import ConfigurationError

__all__ = [
    "DEFAULT_EVENTS_TIMEOUT_MS",
    "JsonRpcConfig",
    "ProviderConfig",
    "EventsConfig",
    "ChainbindConfig",
    "set_config",
    "get_config",
    "reset_config",
    "load_config_from_env",
]

DEFAULT_EVENTS_TIMEOUT_MS = 2000
DEFAULT_POLLING_INTERVAL_MS = 50


class JsonRpcConfig(BaseModel):
    """JSON-RPC endpoint location."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(
        default="http://localhost",
        description="Scheme and host of the JSON-RPC node",
    )
    port: Optional[int] = Field(
        default=8545,
        ge=1,
        le=65535,
        description="Port of the JSON-RPC node; None to use the URL as is",
    )

    @property
    def endpoint(self) -> str:
        if self.port is None:
            return self.url
        return f"{self.url.rstrip('/')}:{self.port}"


class ProviderConfig(BaseModel):
    """Provider (transport) configuration."""

    model_config = ConfigDict(frozen=True)

    network: str = Field(
        default="other",
        description="Network label, informational",
    )
    provider: Literal["jsonrpc"] = Field(
        default="jsonrpc",
        description="Provider kind; only JSON-RPC over HTTP is supported",
    )
    polling_interval_ms: int = Field(
        default=DEFAULT_POLLING_INTERVAL_MS,
        ge=10,
        description="Interval in ms between block polls while listeners exist",
    )
    json_rpc: JsonRpcConfig = Field(default_factory=JsonRpcConfig)


class EventsConfig(BaseModel):
    """Event listener configuration."""

    model_config = ConfigDict(frozen=True)

    timeout_ms: int = Field(
        default=DEFAULT_EVENTS_TIMEOUT_MS,
        ge=1,
        description="Time in ms after which a confirmation listener is retired",
    )


class ChainbindConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(frozen=True)

    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    events: EventsConfig = Field(default_factory=EventsConfig)


_config: Optional[ChainbindConfig] = None


def set_config(config: Union[ChainbindConfig, Dict[str, Any]]) -> ChainbindConfig:
    """
    Install the process-wide configuration.

    Args:
        config: A ChainbindConfig or a dict with the same shape.

    Raises:
        ConfigurationError: If the dict does not validate.
    """
    global _config
    if isinstance(config, ChainbindConfig):
        _config = config
        return _config

    try:
        _config = ChainbindConfig.model_validate(config)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid chainbind configuration",
            details={"errors": e.errors(include_url=False)},
        ) from e
    return _config


def get_config() -> ChainbindConfig:
    """Return the installed configuration, defaults if none was set."""
    global _config
    if _config is None:
        _config = ChainbindConfig()
    return _config


def reset_config() -> None:
    global _config
    _config = None


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be an integer",
            details={"variable": name, "value": raw},
        ) from e


def load_config_from_env(dotenv_path: Optional[str] = None) -> ChainbindConfig:
    """
    Build a configuration from environment variables (and a .env file).

    Environment Variables:
        CHAINBIND_RPC_URL: JSON-RPC URL (default: http://localhost)
        CHAINBIND_RPC_PORT: JSON-RPC port; empty string for none
        CHAINBIND_NETWORK: Network label
        CHAINBIND_POLLING_INTERVAL_MS: Block polling interval
        CHAINBIND_EVENTS_TIMEOUT_MS: Confirmation listener timeout

    The result is not installed; pass it to set_config() if needed.
    """
    load_dotenv(dotenv_path)

    json_rpc: Dict[str, Any] = {}
    if os.getenv("CHAINBIND_RPC_URL"):
        json_rpc["url"] = os.environ["CHAINBIND_RPC_URL"]
    if "CHAINBIND_RPC_PORT" in os.environ:
        json_rpc["port"] = _env_int("CHAINBIND_RPC_PORT")

    provider: Dict[str, Any] = {"json_rpc": json_rpc}
    if os.getenv("CHAINBIND_NETWORK"):
        provider["network"] = os.environ["CHAINBIND_NETWORK"]
    polling = _env_int("CHAINBIND_POLLING_INTERVAL_MS")
    if polling is not None:
        provider["polling_interval_ms"] = polling

    events: Dict[str, Any] = {}
    timeout = _env_int("CHAINBIND_EVENTS_TIMEOUT_MS")
    if timeout is not None:
        events["timeout_ms"] = timeout

    try:
        return ChainbindConfig.model_validate({"provider": provider, "events": events})
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid chainbind environment configuration",
            details={"errors": e.errors(include_url=False)},
        ) from e
