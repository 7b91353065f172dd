"""Core layer: exceptions, structured logging and YAML loading.

Depends only on the standard library and PyYAML; imported by
``relayreader.nips``, ``relayreader.services`` and the CLI.

Attributes:
    Logger: Structured logger supporting key=value and JSON output modes.
        See [Logger][relayreader.core.logger.Logger].
    load_yaml: Safe YAML loading with ``yaml.safe_load()``.
        See [load_yaml()][relayreader.core.yaml.load_yaml].
    RelayReaderError: Root of the exception hierarchy in
        [relayreader.core.exceptions][relayreader.core.exceptions].
"""

from .exceptions import (
    ConfigurationError,
    ConnectivityError,
    NotConnectedError,
    ParseError,
    ProtocolError,
    RelayReaderError,
    SendError,
)
from .logger import Logger, StructuredFormatter, format_kv_pairs
from .yaml import load_yaml


__all__ = [
    "ConfigurationError",
    "ConnectivityError",
    "Logger",
    "NotConnectedError",
    "ParseError",
    "ProtocolError",
    "RelayReaderError",
    "SendError",
    "StructuredFormatter",
    "format_kv_pairs",
    "load_yaml",
]
