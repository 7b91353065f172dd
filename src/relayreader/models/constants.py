"""Shared constants for the models layer.

Defines the enumerations and literal values used across multiple model
modules and by the session and reader layers. Placing them here avoids
circular dependencies between ``models``, ``core`` and ``services``.

See Also:
    [relayreader.models.article][]: Uses the title placeholder and author
        display constants.
    [relayreader.services.session][]: Owns the
        [SessionState][relayreader.models.constants.SessionState] machine.
    [relayreader.nips.nip01][]: Uses
        [MessageType][relayreader.models.constants.MessageType] for frame tags.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final


UNTITLED: Final[str] = "(untitled)"
"""Title used when an event has neither a title tag nor non-blank content."""

UNKNOWN_AUTHOR: Final[str] = "unknown"
"""Author display used when an event carries no public key."""

AUTHOR_DISPLAY_LENGTH: Final[int] = 12
"""Number of leading public key characters shown as the author."""

TITLE_TAG: Final[str] = "title"
"""Tag name carrying an explicit article title (NIP-23 long-form content)."""


class SessionState(StrEnum):
    """Lifecycle state of a [RelaySession][relayreader.services.session.RelaySession].

    Transitions only move forward: ``IDLE -> CONNECTING -> OPEN -> CLOSED``,
    with ``CONNECTING -> CLOSED`` and ``OPEN -> CLOSED`` on error or close,
    and ``IDLE -> CLOSED`` when a session is disconnected before use.
    ``CLOSED`` is terminal: a new session must be created to reconnect.

    Attributes:
        IDLE: Constructed, no connection attempted yet.
        CONNECTING: Transport created, waiting for the open notification.
        OPEN: Connection established; subscriptions may be issued.
        CLOSED: Connection ended (normally or on error). Terminal.
    """

    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class MessageType(StrEnum):
    """NIP-01 frame tags (position 0 of every JSON array frame).

    Attributes:
        REQ: Client subscription request.
        CLOSE: Client subscription close.
        EVENT: Relay event delivery for a subscription.
        EOSE: Relay end-of-stored-events marker.
        OK: Relay acknowledgement of a published event.
        NOTICE: Human-readable relay notice.
    """

    REQ = "REQ"
    CLOSE = "CLOSE"
    EVENT = "EVENT"
    EOSE = "EOSE"
    OK = "OK"
    NOTICE = "NOTICE"


class Severity(StrEnum):
    """Severity of a status-line signal, used by views for styling."""

    INFO = "info"
    OK = "ok"
    WARN = "warn"
    ERROR = "err"


class StatusCode(StrEnum):
    """Machine-readable reason attached to every status-line signal.

    Attributes:
        CONNECTING: A connection attempt started.
        CONNECTED: The relay connection is open.
        DISCONNECTED: The relay connection ended.
        TRANSPORT_ERROR: The transport reported an error.
        REQUESTED: A subscription request was sent.
        END_OF_STORED_EVENTS: The relay sent ``EOSE``.
        REJECTED: The relay answered ``OK`` with ``accepted=false``.
        NOTICE: The relay sent a ``NOTICE``.
        NOT_CONNECTED: An action needed an open connection.
        INVALID_INPUT: Caller-supplied input failed validation.
        SEND_FAILED: The transport rejected a write.
    """

    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    TRANSPORT_ERROR = "transport_error"
    REQUESTED = "requested"
    END_OF_STORED_EVENTS = "end_of_stored_events"
    REJECTED = "rejected"
    NOTICE = "notice"
    NOT_CONNECTED = "not_connected"
    INVALID_INPUT = "invalid_input"
    SEND_FAILED = "send_failed"
