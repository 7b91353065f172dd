"""
Nostr event as delivered by a relay in an ``EVENT`` frame.

Relays are untrusted: the event object is parsed leniently by
[NostrEvent.from_dict()][relayreader.models.event.NostrEvent.from_dict].
Fields with the wrong type fall back to their defaults instead of
rejecting the whole event, and a tag holding any non-string item is
dropped as a whole.
Signatures are not verified.

See Also:
    [relayreader.models.article][]: Projects a
        [NostrEvent][relayreader.models.event.NostrEvent] into an
        [ArticleRecord][relayreader.models.article.ArticleRecord].
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ._validation import validate_instance, validate_int


def _str_or(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def _int_or(value: Any, default: int | None) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return default


def _parse_tags(value: Any) -> tuple[tuple[str, ...], ...]:
    if not isinstance(value, list):
        return ()
    return tuple(
        tuple(tag)
        for tag in value
        if isinstance(tag, list) and all(isinstance(item, str) for item in tag)
    )


@dataclass(frozen=True, slots=True)
class NostrEvent:
    """Immutable event record.

    Attributes:
        id: Event id (hex), empty when the relay omitted it.
        pubkey: Author public key (hex), empty when omitted.
        created_at: Unix timestamp in seconds, ``0`` when omitted.
        content: Free-text content.
        tags: Ordered tag arrays, each an ordered tuple of strings.
        kind: Event kind, or ``None`` when omitted.

    Examples:
        ```python
        event = NostrEvent.from_dict({
            "id": "ab12...", "pubkey": "f00d...", "created_at": 1700000000,
            "kind": 30023, "content": "Hello\\nworld", "tags": [["title", "Hi"]],
        })
        event.first_tag_value("title")   # 'Hi'
        ```
    """

    id: str = ""
    pubkey: str = ""
    created_at: int = 0
    content: str = ""
    tags: tuple[tuple[str, ...], ...] = field(default_factory=tuple)
    kind: int | None = None

    def __post_init__(self) -> None:
        validate_instance(self.id, str, "id")
        validate_instance(self.pubkey, str, "pubkey")
        validate_int(self.created_at, "created_at")
        validate_instance(self.content, str, "content")
        validate_instance(self.tags, tuple, "tags")
        if self.kind is not None:
            validate_int(self.kind, "kind")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NostrEvent:
        """Build an event from a relay's JSON object, tolerating bad fields.

        Raises:
            TypeError: If *data* is not a mapping.
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"event must be a JSON object, got {type(data).__name__}")
        return cls(
            id=_str_or(data.get("id")),
            pubkey=_str_or(data.get("pubkey")),
            created_at=_int_or(data.get("created_at"), 0) or 0,
            content=_str_or(data.get("content")),
            tags=_parse_tags(data.get("tags")),
            kind=_int_or(data.get("kind"), None),
        )

    def first_tag_value(self, name: str) -> str | None:
        """Return the second element of the first tag named *name*.

        Returns ``None`` when no such tag exists or it carries no value.
        """
        for tag in self.tags:
            if tag and tag[0] == name:
                return tag[1] if len(tag) > 1 else None
        return None
