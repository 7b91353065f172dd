"""Configuration model for the reader.

[ReaderConfig][relayreader.services.configs.ReaderConfig] carries the
query defaults a reader form pre-fills (relay address,
kind, limit, optional tag pair) plus transport and CLI settings. Values
come from a YAML file and are overridden by CLI flags.

Examples:
    ```yaml
    relay_url: wss://relay.damus.io
    kind: 30023
    limit: 20
    tag_name: t
    tag_value: nostr
    proxy_url: null
    wait: 30
    ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from relayreader.core.exceptions import ConfigurationError
from relayreader.core.yaml import load_yaml


class ReaderConfig(BaseModel):
    """Reader and CLI configuration.

    See Also:
        [Reader][relayreader.services.reader.Reader]: Consumes this config.
        [WebSocketTransport][relayreader.utils.transport.WebSocketTransport]:
            Receives ``proxy_url``, ``connect_timeout`` and ``close_timeout``.
    """

    relay_url: str = Field(default="wss://relay.damus.io", description="Relay WebSocket URL")
    kind: int = Field(default=30023, ge=0, description="Event kind to query")
    limit: int = Field(default=20, ge=1, le=5000, description="Maximum number of events")
    tag_name: str | None = Field(default=None, description="Optional tag filter name (e.g. 't')")
    tag_value: str | None = Field(default=None, description="Optional tag filter value")
    proxy_url: str | None = Field(default=None, description="SOCKS5 proxy URL")
    connect_timeout: float | None = Field(
        default=None,
        gt=0.0,
        description="WebSocket handshake timeout in seconds (None = no timeout)",
    )
    close_timeout: float = Field(default=5.0, gt=0.0, le=60.0)
    wait: float = Field(
        default=30.0,
        gt=0.0,
        le=600.0,
        description="CLI: seconds to wait for the connection and for EOSE",
    )

    @field_validator("relay_url")
    @classmethod
    def _strip_url(cls, value: str) -> str:
        return value.strip()

    @field_validator("tag_name", "tag_value", "proxy_url")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Validate *data*, wrapping Pydantic errors in ``ConfigurationError``."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"invalid reader config: {e}") from e

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> Self:
        """Load and validate a YAML config file.

        Raises:
            ConfigurationError: If the file is missing, is not valid YAML,
                or fails validation.
        """
        try:
            data = load_yaml(config_path)
        except (FileNotFoundError, TypeError, yaml.YAMLError) as e:
            raise ConfigurationError(str(e)) from e
        return cls.from_dict(data)
