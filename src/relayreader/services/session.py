"""
Relay session: one connection, one active subscription.

[RelaySession][relayreader.services.session.RelaySession] owns the
transport, the connection state machine and the single active
subscription id. It turns inbound frames into listener callbacks:

* ``EVENT`` -> [project_article()][relayreader.models.article.project_article]
  -> ``listener.on_article(record)``
* ``EOSE`` -> ``listener.on_status(...)`` "received all results"
* ``OK`` with ``accepted=false`` and ``NOTICE`` -> warning statuses
* malformed frames -> warning log, dropped

State machine (every accepted transition calls
``listener.on_state_change``):

```text
IDLE --connect()--> CONNECTING --open--> OPEN
  |                      |                 |
  +----disconnect()------+--error/close----+--> CLOSED (terminal)
```

Everything runs on a single asyncio event loop: ``connect`` returns
immediately and the transport reports the outcome later; ``subscribe``
and ``disconnect`` only await the transport write/close. No locking is
needed.

Examples:
    ```python
    session = RelaySession(listener)
    session.connect("wss://relay.example.com")
    # ... listener.on_state_change(SessionState.OPEN)
    await session.subscribe(Filter(kinds=(30023,), limit=20))
    # ... listener.on_article(record) per EVENT
    await session.disconnect()
    ```
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from types import TracebackType
from typing import Protocol, Self

from relayreader.core.exceptions import (
    ConnectivityError,
    NotConnectedError,
    ParseError,
    SendError,
)
from relayreader.core.logger import Logger
from relayreader.models.article import ArticleRecord, project_article
from relayreader.models.constants import SessionState, Severity, StatusCode
from relayreader.models.event import NostrEvent
from relayreader.models.filter import Filter
from relayreader.models.message import (
    EoseMessage,
    EventMessage,
    NoticeMessage,
    OkMessage,
)
from relayreader.models.status import Status
from relayreader.nips.nip01 import encode_close, encode_req, parse_relay_message
from relayreader.utils.transport import Transport, TransportFactory, WebSocketTransport


class SessionListener(Protocol):
    """Receives everything a [RelaySession][relayreader.services.session.RelaySession] emits."""

    def on_state_change(self, state: SessionState) -> None: ...

    def on_status(self, status: Status) -> None: ...

    def on_article(self, article: ArticleRecord) -> None: ...

    def on_clear(self) -> None:
        """Previously rendered articles must be discarded (new subscription)."""
        ...


_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.IDLE: frozenset({SessionState.CONNECTING, SessionState.CLOSED}),
    SessionState.CONNECTING: frozenset({SessionState.OPEN, SessionState.CLOSED}),
    SessionState.OPEN: frozenset({SessionState.CLOSED}),
    SessionState.CLOSED: frozenset(),
}


def new_subscription_id() -> str:
    """Return a fresh client-side subscription id (``sub-`` + 12 hex chars)."""
    return f"sub-{uuid.uuid4().hex[:12]}"


class RelaySession:
    """Single-use connection to one relay with at most one subscription.

    Args:
        listener: Receives state changes, statuses, articles and clear
            signals.
        transport_factory: Builds the transport for ``connect``; raises
            ``ValueError`` for a malformed address.
        projector: Converts events to article records.
        id_factory: Generates subscription ids.
    """

    def __init__(
        self,
        listener: SessionListener,
        *,
        transport_factory: TransportFactory = WebSocketTransport,
        projector: Callable[[NostrEvent], ArticleRecord] = project_article,
        id_factory: Callable[[], str] = new_subscription_id,
    ) -> None:
        self._listener = listener
        self._transport_factory = transport_factory
        self._projector = projector
        self._id_factory = id_factory
        self._logger = Logger("session")

        self._state = SessionState.IDLE
        self._transport: Transport | None = None
        self._subscription_id: str | None = None
        self._url: str | None = None

    # -- Properties ----------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is SessionState.OPEN

    @property
    def subscription_id(self) -> str | None:
        """The active subscription id, or ``None``."""
        return self._subscription_id

    @property
    def url(self) -> str | None:
        return self._url

    # -- Operations ----------------------------------------------------------

    def connect(self, url: str) -> None:
        """Start connecting to *url* and return immediately.

        The state becomes ``CONNECTING``; the transport later reports
        ``OPEN`` or ``CLOSED``.

        Raises:
            ConnectivityError: If *url* is empty or malformed, or the
                session was already used. The state is unchanged.
        """
        url = (url or "").strip()
        if not url:
            raise ConnectivityError("relay url must not be empty")
        if self._state is not SessionState.IDLE:
            raise ConnectivityError(
                f"session is {self._state.value}; create a new session to reconnect"
            )

        try:
            transport = self._transport_factory(url, self)
        except ValueError as e:
            self._logger.warning("connect_rejected", url=url, error=str(e))
            raise ConnectivityError(str(e)) from e

        self._transport = transport
        self._url = url
        self._logger.info("connecting", url=url)
        self._transition(SessionState.CONNECTING)

    async def subscribe(self, flt: Filter) -> str:
        """Replace the active subscription and send its ``REQ`` frame.

        A previous subscription is superseded client-side only: no
        ``CLOSE`` is sent for it.

        Returns:
            The new subscription id.

        Raises:
            NotConnectedError: If the session is not ``OPEN``. Nothing is sent.
            SendError: If the transport rejects the write. The state is unchanged.
        """
        if self._state is not SessionState.OPEN or self._transport is None:
            raise NotConnectedError(f"cannot subscribe: session is {self._state.value}")

        self._listener.on_clear()
        subscription_id = self._id_factory()
        if self._subscription_id is not None:
            self._logger.debug(
                "subscription_superseded",
                previous=self._subscription_id,
                current=subscription_id,
            )
        self._subscription_id = subscription_id

        try:
            await self._transport.send(encode_req(subscription_id, flt))
        except OSError as e:
            self._logger.warning(
                "subscribe_send_failed", subscription_id=subscription_id, error=str(e)
            )
            raise SendError(str(e)) from e

        self._logger.info("subscribed", subscription_id=subscription_id, filter=flt.describe())
        return subscription_id

    async def disconnect(self) -> None:
        """Close the subscription and the connection. Total and idempotent.

        Sends ``CLOSE`` for the active subscription when open, then closes
        the transport. Failures are logged as warnings, never raised.
        """
        transport, self._transport = self._transport, None
        subscription_id, self._subscription_id = self._subscription_id, None

        if transport is not None:
            if subscription_id is not None and self._state is SessionState.OPEN:
                try:
                    await transport.send(encode_close(subscription_id))
                except OSError as e:
                    self._logger.warning(
                        "close_frame_failed", subscription_id=subscription_id, error=str(e)
                    )
            try:
                await transport.close()
            except Exception as e:  # Intentionally broad: disconnect never raises
                self._logger.warning("transport_close_failed", url=self._url, error=str(e))

        self._transition(SessionState.CLOSED)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.disconnect()

    # -- Transport notifications ---------------------------------------------

    def handle_open(self) -> None:
        self._transition(SessionState.OPEN)

    def handle_message(self, text: str) -> None:
        """Parse one inbound frame and dispatch it to the listener."""
        try:
            message = parse_relay_message(text)
        except ParseError as e:
            self._logger.warning("frame_dropped", error=str(e), frame=text)
            return

        if isinstance(message, EventMessage):
            if message.subscription_id != self._subscription_id:
                self._logger.debug(
                    "event_for_other_subscription", subscription_id=message.subscription_id
                )
            self._listener.on_article(self._projector(message.event))
        elif isinstance(message, EoseMessage):
            self._logger.info("end_of_stored_events", subscription_id=message.subscription_id)
            self._emit(StatusCode.END_OF_STORED_EVENTS, "received all results", Severity.OK)
        elif isinstance(message, OkMessage):
            if message.accepted:
                self._logger.debug("event_accepted", event_id=message.event_id)
            else:
                self._emit(StatusCode.REJECTED, f"relay rejected: {message.message}", Severity.WARN)
        elif isinstance(message, NoticeMessage):
            self._logger.info("relay_notice", message=message.message)
            self._emit(StatusCode.NOTICE, f"relay notice: {message.message}", Severity.WARN)
        else:
            self._logger.debug("frame_ignored", frame=text)

    def handle_error(self, error: BaseException) -> None:
        if self._state is SessionState.CLOSED:
            self._logger.debug("transport_error_after_close", error=str(error))
            return
        self._logger.warning("transport_error", url=self._url, error=str(error))
        self._emit(StatusCode.TRANSPORT_ERROR, "websocket error", Severity.ERROR)
        self._subscription_id = None
        self._transition(SessionState.CLOSED)

    def handle_close(self) -> None:
        self._subscription_id = None
        self._transition(SessionState.CLOSED)

    # -- Internals -----------------------------------------------------------

    def _emit(self, code: StatusCode, text: str, severity: Severity) -> None:
        self._listener.on_status(Status(code, text, severity))

    def _transition(self, new_state: SessionState) -> bool:
        """Move to *new_state* if allowed and notify the listener."""
        if new_state is self._state:
            return False
        if new_state not in _TRANSITIONS[self._state]:
            self._logger.debug(
                "transition_ignored", current=self._state.value, requested=new_state.value
            )
            return False
        self._logger.debug("state_changed", previous=self._state.value, current=new_state.value)
        self._state = new_state
        self._listener.on_state_change(new_state)
        return True
