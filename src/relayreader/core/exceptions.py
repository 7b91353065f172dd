"""relayreader exception hierarchy.

Provides typed exceptions for every failure the client can report. None of
them is fatal: callers (the [Reader][relayreader.services.reader.Reader]
facade and the CLI) turn each into a status-line signal and keep a stable,
still-usable state.

Exception hierarchy:

```text
RelayReaderError (base -- never raised directly)
├── ConfigurationError      -- config validation, missing keys, bad YAML
├── ConnectivityError       -- malformed relay address, transport failures
│   └── SendError           -- transport rejected a write
├── NotConnectedError       -- action attempted while the session is not open
└── ProtocolError           -- NIP-01 framing failures
    └── ParseError          -- malformed inbound frame (logged, never surfaced)
```

Relay rejections (``["OK", id, false, msg]``) and ``NOTICE`` frames are
not exceptions: the session reports them as warning statuses and the
connection stays open.

See Also:
    [RelaySession][relayreader.services.session.RelaySession]: Raises
        [ConnectivityError][relayreader.core.exceptions.ConnectivityError],
        [NotConnectedError][relayreader.core.exceptions.NotConnectedError]
        and [SendError][relayreader.core.exceptions.SendError].
    [parse_relay_message()][relayreader.nips.nip01.parse_relay_message]:
        Raises [ParseError][relayreader.core.exceptions.ParseError].
"""

from __future__ import annotations


class RelayReaderError(Exception):
    """Base exception for all relayreader errors.

    Never raised directly -- always use a specific subclass.
    """


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(RelayReaderError):
    """Invalid or missing configuration (YAML file, CLI flags).

    See Also:
        [ReaderConfig.from_yaml()][relayreader.services.configs.ReaderConfig.from_yaml]:
            Wraps YAML and validation failures in this exception.
    """


# ---------------------------------------------------------------------------
# Connectivity
# ---------------------------------------------------------------------------


class ConnectivityError(RelayReaderError):
    """Relay address rejected or transport-level open failure.

    Raised synchronously by
    [RelaySession.connect()][relayreader.services.session.RelaySession.connect]
    when the transport cannot even be constructed; the session stays idle.
    """


class SendError(ConnectivityError):
    """The transport rejected a write. The session state is unchanged."""


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------


class NotConnectedError(RelayReaderError):
    """An operation needed an open session. Nothing was sent."""


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


class ProtocolError(RelayReaderError):
    """NIP-01 framing or validation failure."""


class ParseError(ProtocolError):
    """Inbound frame is not valid JSON, not a non-empty array, or malformed.

    The session logs and drops such frames; the connection stays open.
    """
