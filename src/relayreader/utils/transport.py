"""WebSocket transport for relay sessions.

Defines the transport abstraction consumed by
[RelaySession][relayreader.services.session.RelaySession] and its aiohttp
implementation. A transport mirrors a browser ``WebSocket``: constructing
it starts the connection, and the outcome is reported through listener
notifications rather than a return value.

```text
WebSocketTransport(url, listener)
   |  connect task (ws_connect)
   |-- success --> listener.handle_open()
   |                 text frames --> listener.handle_message(text)
   |                 ERROR frame --> listener.handle_error(exc)
   |-- failure --> listener.handle_error(exc)
   `-- always  --> listener.handle_close()   (exactly once)
```

Attributes:
    Transport: Protocol for a connected text-frame transport.
    TransportListener: Protocol for the notification sink.
    TransportFactory: ``(url, listener) -> Transport`` callable.
    WebSocketTransport: aiohttp implementation with optional SOCKS5 proxy
        support via ``aiohttp_socks``.

Note:
    The utils layer has **zero** imports from ``relayreader.core`` or
    ``relayreader.services``; it logs through ``logging.getLogger`` and the
    CLI's root ``StructuredFormatter`` formats the records.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Final, Protocol, TypeAlias

import aiohttp
from aiohttp_socks import ProxyConnector

from relayreader.models.relay import Relay


DEFAULT_CLOSE_TIMEOUT: Final[float] = 5.0

logger = logging.getLogger("utils.transport")


class TransportListener(Protocol):
    """Receives connection notifications from a transport."""

    def handle_open(self) -> None: ...

    def handle_message(self, text: str) -> None: ...

    def handle_error(self, error: BaseException) -> None: ...

    def handle_close(self) -> None: ...


class Transport(Protocol):
    """Bidirectional text-frame connection."""

    async def send(self, text: str) -> None:
        """Send one text frame. Raises ``OSError`` when the write is rejected."""
        ...

    async def close(self) -> None:
        """Close the connection, cancelling a pending connect."""
        ...


TransportFactory: TypeAlias = Callable[[str, TransportListener], Transport]


class WebSocketTransport:
    """aiohttp-based WebSocket transport.

    The URL is validated synchronously (``ValueError`` for a malformed
    address); the connection itself runs in a task on the running event
    loop, so the constructor must be called from within a coroutine.

    Args:
        url: Relay address (``ws://`` or ``wss://``).
        listener: Notification sink, usually a
            [RelaySession][relayreader.services.session.RelaySession].
        proxy_url: Optional SOCKS5 proxy (e.g. ``socks5://127.0.0.1:9050``).
        timeout: Handshake timeout in seconds; ``None`` waits indefinitely.
        close_timeout: Upper bound for the closing handshake.

    Raises:
        ValueError: If *url* is not a valid ``ws``/``wss`` URL.
        RuntimeError: If no event loop is running.
    """

    def __init__(
        self,
        url: str,
        listener: TransportListener,
        *,
        proxy_url: str | None = None,
        timeout: float | None = None,  # noqa: ASYNC109
        close_timeout: float = DEFAULT_CLOSE_TIMEOUT,
    ) -> None:
        self.relay = Relay(url)
        self._listener = listener
        self._proxy_url = proxy_url
        self._timeout = timeout
        self._close_timeout = close_timeout
        self._session: aiohttp.ClientSession | None = None
        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._close_notified = False
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=f"ws-transport:{self.relay.url}"
        )

    @property
    def is_open(self) -> bool:
        return self._ws is not None and not self._ws.closed

    def _create_session(self) -> aiohttp.ClientSession:
        client_timeout = aiohttp.ClientTimeout(total=self._timeout)
        if self._proxy_url:
            connector = ProxyConnector.from_url(self._proxy_url)
            return aiohttp.ClientSession(connector=connector, timeout=client_timeout)
        return aiohttp.ClientSession(timeout=client_timeout)

    async def _run(self) -> None:
        """Connect, pump inbound frames to the listener, then notify close."""
        try:
            self._session = self._create_session()
            try:
                self._ws = await self._session.ws_connect(self.relay.url)
            except (aiohttp.ClientError, OSError, TimeoutError) as e:
                logger.debug("ws_connect_failed url=%s error=%s", self.relay.url, str(e))
                self._listener.handle_error(e)
                return

            logger.debug("ws_connected url=%s", self.relay.url)
            self._listener.handle_open()

            async for msg in self._ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    self._listener.handle_message(msg.data)
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    error = self._ws.exception() or ConnectionError("websocket error")
                    self._listener.handle_error(error)
                    break
                else:
                    logger.debug("ws_frame_ignored url=%s type=%s", self.relay.url, msg.type.name)
        finally:
            await self._close_session()
            self._notify_close()

    async def send(self, text: str) -> None:
        """Send one text frame.

        Raises:
            ConnectionResetError: If the WebSocket is not open.
            OSError: If aiohttp rejects the write.
        """
        if self._ws is None or self._ws.closed:
            raise ConnectionResetError(f"WebSocket to {self.relay.url} is not open")
        try:
            await self._ws.send_str(text)
        except aiohttp.ClientError as e:
            raise OSError(f"send failed: {e}") from e

    async def close(self) -> None:
        """Close the WebSocket, or cancel the connect task if still pending.

        Returns only once the connection task has finished.

        Raises:
            TimeoutError: If the closing handshake exceeds ``close_timeout``.
            Exception: Whatever ended the connection task, if it failed.
        """
        try:
            if self._ws is not None and not self._ws.closed:
                await asyncio.wait_for(self._ws.close(), timeout=self._close_timeout)
        finally:
            try:
                await self._finish_task()
            finally:
                await self._close_session()

    async def _finish_task(self) -> None:
        """Await the connection task, cancelling it unless the socket is closed."""
        if not self._task.done() and (self._ws is None or not self._ws.closed):
            self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            logger.debug("ws_task_cancelled url=%s", self.relay.url)

    async def _close_session(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()

    def _notify_close(self) -> None:
        if self._close_notified:
            return
        self._close_notified = True
        logger.debug("ws_closed url=%s", self.relay.url)
        self._listener.handle_close()
