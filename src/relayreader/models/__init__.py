"""Pure frozen dataclasses with zero I/O for relays, filters, events and articles.

The models layer is the foundation of the package. It has **no
dependencies** on any other relayreader package. Every model uses
``@dataclass(frozen=True, slots=True)`` and validates in ``__post_init__``
so invalid instances never escape the constructor.

Attributes:
    Relay: Validated ``ws://``/``wss://`` relay address (RFC 3986).
    Filter: Subscription filter (kinds, limit, single-value tag constraints).
    NostrEvent: Leniently parsed event as delivered by a relay.
    EventMessage, EoseMessage, OkMessage, NoticeMessage, UnknownMessage:
        Inbound relay message variants; ``RelayMessage`` is their union.
    ArticleRecord: Title/body/author/timestamp projection of an event,
        built by [project_article()][relayreader.models.article.project_article].
    Status: Status-line signal with a
        [StatusCode][relayreader.models.constants.StatusCode] and a
        [Severity][relayreader.models.constants.Severity].
    SessionState: Connection lifecycle enum.
"""

from .article import (
    ArticleRecord,
    author_display,
    derive_body,
    derive_title,
    event_timestamp,
    project_article,
)
from .constants import (
    UNKNOWN_AUTHOR,
    UNTITLED,
    MessageType,
    SessionState,
    Severity,
    StatusCode,
)
from .event import NostrEvent
from .filter import Filter
from .message import (
    EoseMessage,
    EventMessage,
    NoticeMessage,
    OkMessage,
    RelayMessage,
    UnknownMessage,
)
from .relay import Relay
from .status import Status


__all__ = [
    "UNKNOWN_AUTHOR",
    "UNTITLED",
    "ArticleRecord",
    "EoseMessage",
    "EventMessage",
    "Filter",
    "MessageType",
    "NostrEvent",
    "NoticeMessage",
    "OkMessage",
    "Relay",
    "RelayMessage",
    "SessionState",
    "Severity",
    "Status",
    "StatusCode",
    "UnknownMessage",
    "author_display",
    "derive_body",
    "derive_title",
    "event_timestamp",
    "project_article",
]
