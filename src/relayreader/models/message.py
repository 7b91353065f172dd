"""Inbound relay message variants.

Each NIP-01 frame a relay can send is parsed by
[parse_relay_message()][relayreader.nips.nip01.parse_relay_message] into
exactly one of these frozen dataclasses. ``RelayMessage`` is their union.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeAlias

from .event import NostrEvent


@dataclass(frozen=True, slots=True)
class EventMessage:
    """``["EVENT", <subscription_id>, <event>]``."""

    subscription_id: str
    event: NostrEvent


@dataclass(frozen=True, slots=True)
class EoseMessage:
    """``["EOSE", <subscription_id>]``: all stored events were sent."""

    subscription_id: str


@dataclass(frozen=True, slots=True)
class OkMessage:
    """``["OK", <event_id>, <accepted>, <message>]``."""

    event_id: str
    accepted: bool
    message: str = ""


@dataclass(frozen=True, slots=True)
class NoticeMessage:
    """``["NOTICE", <message>]``."""

    message: str


@dataclass(frozen=True, slots=True)
class UnknownMessage:
    """Well-formed array frame with an unrecognized tag. Ignored."""

    raw: list[Any]


RelayMessage: TypeAlias = EventMessage | EoseMessage | OkMessage | NoticeMessage | UnknownMessage
