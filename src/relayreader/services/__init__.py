"""Session and reader layer.

Attributes:
    RelaySession: Single-use relay connection with one active subscription.
        See [RelaySession][relayreader.services.session.RelaySession].
    Reader: UI-facing facade keeping the status line and article list.
        See [Reader][relayreader.services.reader.Reader].
    ReaderConfig: Pydantic configuration loaded from YAML.
"""

from .configs import ReaderConfig
from .reader import NullView, Reader, ReaderView
from .session import RelaySession, SessionListener, new_subscription_id


__all__ = [
    "NullView",
    "Reader",
    "ReaderConfig",
    "ReaderView",
    "RelaySession",
    "SessionListener",
    "new_subscription_id",
]
