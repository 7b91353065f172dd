"""Network transport utilities.

The utils layer depends only on [relayreader.models][relayreader.models].

Attributes:
    transport: Transport protocols and the aiohttp
        [WebSocketTransport][relayreader.utils.transport.WebSocketTransport].
"""

from relayreader.utils.transport import (
    Transport,
    TransportFactory,
    TransportListener,
    WebSocketTransport,
)


__all__ = [
    "Transport",
    "TransportFactory",
    "TransportListener",
    "WebSocketTransport",
]
