"""
NIP-01 client/relay framing.

Every frame is a JSON array whose first element is a string tag. This
module encodes the two client frames the reader sends and parses the
relay frames it understands:

```text
client -> relay   ["REQ", <sub_id>, <filter>]      ["CLOSE", <sub_id>]
relay -> client   ["EVENT", <sub_id>, <event>]     ["EOSE", <sub_id>]
                  ["OK", <event_id>, <bool>, <msg>]  ["NOTICE", <msg>]
```

Any other tag parses to
[UnknownMessage][relayreader.models.message.UnknownMessage]. Frames that
are not JSON, not a non-empty array, or carry a malformed payload for a
known tag raise [ParseError][relayreader.core.exceptions.ParseError].

See Also:
    [RelaySession][relayreader.services.session.RelaySession]: Sends the
        encoded frames and dispatches parsed messages.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from relayreader.core.exceptions import ParseError
from relayreader.models.constants import MessageType
from relayreader.models.event import NostrEvent
from relayreader.models.message import (
    EoseMessage,
    EventMessage,
    NoticeMessage,
    OkMessage,
    RelayMessage,
    UnknownMessage,
)


if TYPE_CHECKING:
    from relayreader.models.filter import Filter


def _dumps(frame: list[Any]) -> str:
    return json.dumps(frame, separators=(",", ":"), ensure_ascii=False)


def encode_req(subscription_id: str, flt: Filter) -> str:
    """Encode a ``REQ`` frame for *flt* under *subscription_id*."""
    return _dumps([MessageType.REQ.value, subscription_id, flt.to_dict()])


def encode_close(subscription_id: str) -> str:
    """Encode a ``CLOSE`` frame for *subscription_id*."""
    return _dumps([MessageType.CLOSE.value, subscription_id])


def _expect_str(frame: list[Any], index: int, what: str) -> str:
    if len(frame) <= index or not isinstance(frame[index], str):
        raise ParseError(f"{frame[0]} frame: {what} must be a string")
    return frame[index]


def _parse_event(frame: list[Any]) -> EventMessage:
    subscription_id = _expect_str(frame, 1, "subscription id")
    if len(frame) <= 2 or not isinstance(frame[2], dict):
        raise ParseError("EVENT frame: event must be a JSON object")
    return EventMessage(subscription_id, NostrEvent.from_dict(frame[2]))


def _parse_eose(frame: list[Any]) -> EoseMessage:
    return EoseMessage(_expect_str(frame, 1, "subscription id"))


def _parse_ok(frame: list[Any]) -> OkMessage:
    event_id = _expect_str(frame, 1, "event id")
    if len(frame) <= 2 or not isinstance(frame[2], bool):
        raise ParseError("OK frame: accepted flag must be a boolean")
    message = frame[3] if len(frame) > 3 and isinstance(frame[3], str) else ""
    return OkMessage(event_id, frame[2], message)


def _parse_notice(frame: list[Any]) -> NoticeMessage:
    return NoticeMessage(_expect_str(frame, 1, "message"))


_PARSERS = {
    MessageType.EVENT: _parse_event,
    MessageType.EOSE: _parse_eose,
    MessageType.OK: _parse_ok,
    MessageType.NOTICE: _parse_notice,
}


def parse_relay_message(raw: str | bytes) -> RelayMessage:
    """Parse one inbound text frame.

    Args:
        raw: Frame payload as received from the transport.

    Returns:
        The matching [RelayMessage][relayreader.models.message.RelayMessage]
        variant; ``UnknownMessage`` for unrecognized tags.

    Raises:
        ParseError: If the frame is not valid JSON, not a non-empty array,
            its tag is not a string, or a known tag has a malformed payload.

    Examples:
        ```python
        parse_relay_message('["EOSE","sub-1"]')
        # EoseMessage(subscription_id='sub-1')
        ```
    """
    try:
        frame = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"frame is not valid JSON: {e}") from e

    if not isinstance(frame, list):
        raise ParseError(f"frame must be a JSON array, got {type(frame).__name__}")
    if not frame:
        raise ParseError("frame is an empty array")
    if not isinstance(frame[0], str):
        raise ParseError("frame tag must be a string")

    try:
        parser = _PARSERS[MessageType(frame[0])]
    except (ValueError, KeyError):
        return UnknownMessage(frame)
    return parser(frame)
