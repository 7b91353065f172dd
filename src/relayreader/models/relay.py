"""
Validated WebSocket relay address.

Parses and normalizes relay URLs (``ws://`` or ``wss://``) with RFC 3986
validation. Unlike an archiving crawler, an interactive reader connects to
whatever the user typed, so local and private hosts are accepted and the
scheme is kept as given.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rfc3986 import uri_reference
from rfc3986.exceptions import UnpermittedComponentError, ValidationError
from rfc3986.validators import Validator


@dataclass(frozen=True, slots=True)
class Relay:
    """Immutable, validated relay address.

    Attributes:
        url: Normalized URL including scheme (trailing slash removed).
        scheme: ``ws`` or ``wss``.
        host: Hostname or IP address (brackets stripped for IPv6).
        port: Explicit port number, or ``None`` when using the default.
        path: URL path component, or ``None``.

    Raises:
        ValueError: If the URL is empty, malformed, uses a scheme other
            than ``ws``/``wss``, has no host, or contains null bytes.

    Examples:
        ```python
        relay = Relay("wss://relay.damus.io/")
        relay.url       # 'wss://relay.damus.io'
        relay.host      # 'relay.damus.io'

        Relay("ws://localhost:7777").port   # 7777
        ```
    """

    raw_url: str = field(repr=False)

    url: str = field(init=False)
    scheme: str = field(init=False)
    host: str = field(init=False)
    port: int | None = field(init=False)
    path: str | None = field(init=False)

    def __post_init__(self) -> None:
        if not isinstance(self.raw_url, str):
            raise TypeError(f"raw_url must be a str, got {type(self.raw_url).__name__}")
        if "\x00" in self.raw_url:
            raise ValueError("Relay URL contains null bytes")
        raw = self.raw_url.strip()
        if not raw:
            raise ValueError("Relay URL must not be empty")

        uri = uri_reference(raw).normalize()
        validator = (
            Validator()
            .require_presence_of("scheme", "host")
            .allow_schemes("ws", "wss")
            .check_validity_of("scheme", "host", "port", "path")
        )
        try:
            validator.validate(uri)
        except UnpermittedComponentError:
            raise ValueError(f"Invalid scheme in '{raw}': must be ws or wss") from None
        except ValidationError as e:
            raise ValueError(f"Invalid URL '{raw}': {e}") from None

        host = uri.host.strip("[]")
        if not host:
            raise ValueError(f"Invalid URL '{raw}': missing host")
        port = int(uri.port) if uri.port else None
        path = (uri.path or "").rstrip("/") or None

        formatted_host = f"[{host}]" if ":" in host else host
        authority = f"{formatted_host}:{port}" if port else formatted_host
        url = f"{uri.scheme}://{authority}{path or ''}"
        if uri.query:
            url += f"?{uri.query}"

        object.__setattr__(self, "url", url)
        object.__setattr__(self, "scheme", uri.scheme)
        object.__setattr__(self, "host", host)
        object.__setattr__(self, "port", port)
        object.__setattr__(self, "path", path)

    def __str__(self) -> str:
        return self.url
