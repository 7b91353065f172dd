"""
Article projection of Nostr events.

Turns an [NostrEvent][relayreader.models.event.NostrEvent] into an
[ArticleRecord][relayreader.models.article.ArticleRecord]: a title, a
body, a short author display and a timestamp.

Title derivation:

1. The value of the first ``title`` tag, when present and non-empty.
2. Otherwise the first non-blank line of the content, stripped.
3. Otherwise ``"(untitled)"``.

The body is the stripped content with the title removed from its start
when the content literally begins with it. A tag title that does not
prefix the content leaves the body unchanged, so the title text can
appear twice.

Note:
    Projection is pure: no I/O, no shared state. It runs once per
    ``EVENT`` frame inside
    [RelaySession.handle_message()][relayreader.services.session.RelaySession.handle_message].
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from .constants import AUTHOR_DISPLAY_LENGTH, TITLE_TAG, UNKNOWN_AUTHOR, UNTITLED
from .event import NostrEvent


@dataclass(frozen=True, slots=True)
class ArticleRecord:
    """Rendered article, created once per event and never mutated.

    Attributes:
        title: Derived title.
        body: Content without the leading title.
        author_display: First 12 characters of the pubkey, or ``"unknown"``.
        timestamp: Event creation time (UTC). Timestamps past year 9999
            are clamped to ``datetime.max``.
    """

    title: str
    body: str
    author_display: str
    timestamp: datetime


def derive_title(event: NostrEvent) -> str:
    """Return the article title for *event* (tag, first line, or placeholder)."""
    tagged = event.first_tag_value(TITLE_TAG)
    if tagged:
        return tagged
    for line in event.content.strip().split("\n"):
        if line.strip():
            return line.strip()
    return UNTITLED


def derive_body(content: str, title: str) -> str:
    """Return *content* stripped, minus *title* when it is a literal prefix."""
    stripped = content.strip()
    if stripped.startswith(title):
        return stripped[len(title) :].strip()
    return stripped


def author_display(pubkey: str) -> str:
    """Return the shortened author key shown next to an article."""
    return pubkey[:AUTHOR_DISPLAY_LENGTH] or UNKNOWN_AUTHOR


def event_timestamp(created_at: int) -> datetime:
    """Convert Unix seconds to a UTC datetime, clamped to ``datetime.max``."""
    try:
        return datetime.fromtimestamp(created_at, tz=UTC)
    except (OverflowError, ValueError, OSError):
        return datetime.max.replace(tzinfo=UTC)


def project_article(event: NostrEvent) -> ArticleRecord:
    """Project *event* into an [ArticleRecord][relayreader.models.article.ArticleRecord].

    Examples:
        ```python
        event = NostrEvent(content="  \\nHello\\nworld")
        record = project_article(event)
        record.title   # 'Hello'
        record.body    # 'world'
        ```
    """
    title = derive_title(event)
    return ArticleRecord(
        title=title,
        body=derive_body(event.content, title),
        author_display=author_display(event.pubkey),
        timestamp=event_timestamp(event.created_at),
    )
