"""
Subscription filter sent with a NIP-01 ``REQ`` request.

A [Filter][relayreader.models.filter.Filter] describes the server-side
query: which event kinds, how many results at most, and optional tag
constraints. Tag constraints are encoded as ``"#<name>": [value]`` keys,
the shape relays expect for single-letter (and other) tag queries.

See Also:
    [relayreader.nips.nip01][]: Serializes the filter into ``REQ`` frames.
    [RelaySession.subscribe()][relayreader.services.session.RelaySession.subscribe]:
        Sends the encoded filter.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ._validation import validate_int, validate_str_not_empty


@dataclass(frozen=True, slots=True)
class Filter:
    """Immutable subscription filter.

    Attributes:
        kinds: Event kinds to match, in request order. At least one.
        limit: Maximum number of stored events the relay should return.
        tags: Tag name to its single allowed value. Frozen mapping.

    Raises:
        TypeError: If a kind or the limit is not an ``int``, or a tag
            name/value is not a ``str``.
        ValueError: If ``kinds`` is empty, a kind is
            negative, ``limit < 1``, or a tag name/value is empty or
            contains null bytes.

    Examples:
        ```python
        flt = Filter(kinds=(30023,), limit=20, tags={"t": "nostr"})
        flt.to_dict()
        # {'kinds': [30023], 'limit': 20, '#t': ['nostr']}
        ```
    """

    kinds: tuple[int, ...]
    limit: int
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        kinds = tuple(self.kinds) if isinstance(self.kinds, Iterable) else self.kinds
        if not isinstance(kinds, tuple) or not kinds:
            raise ValueError("kinds must contain at least one event kind")
        for kind in kinds:
            validate_int(kind, "kind", minimum=0)
        validate_int(self.limit, "limit", minimum=1)

        if not isinstance(self.tags, Mapping):
            raise TypeError(f"tags must be a Mapping, got {type(self.tags).__name__}")
        for name, value in self.tags.items():
            validate_str_not_empty(name, "tag name")
            validate_str_not_empty(value, f"tag value for '{name}'")

        object.__setattr__(self, "kinds", kinds)
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))

    @classmethod
    def from_query(
        cls,
        kind: int,
        limit: int,
        tag_name: str | None = None,
        tag_value: str | None = None,
    ) -> Filter:
        """Build a single-kind filter from query form values.

        The tag constraint is only added when both the name and the value
        are non-blank after stripping; a half-filled pair is ignored.
        """
        name = (tag_name or "").strip()
        value = (tag_value or "").strip()
        tags = {name: value} if name and value else {}
        return cls(kinds=(kind,), limit=limit, tags=tags)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready filter object for a ``REQ`` frame."""
        encoded: dict[str, Any] = {"kinds": list(self.kinds), "limit": self.limit}
        for name, value in self.tags.items():
            encoded[f"#{name}"] = [value]
        return encoded

    def describe(self) -> str:
        """Short human-readable summary, e.g. ``kind 1, limit 20, #t=nostr``."""
        kinds = ",".join(str(k) for k in self.kinds)
        parts = [f"kind {kinds}", f"limit {self.limit}"]
        parts.extend(f"#{name}={value}" for name, value in self.tags.items())
        return ", ".join(parts)
