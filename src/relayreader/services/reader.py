"""
Reader facade: the UI-facing side of a relay session.

[Reader][relayreader.services.reader.Reader] holds what a page or terminal
front end displays (the status line, the rendered article list and the
connected flag) and turns raw query input into a
[Filter][relayreader.models.filter.Filter]. It implements the
[SessionListener][relayreader.services.session.SessionListener] protocol
and forwards every change to an injected
[ReaderView][relayreader.services.reader.ReaderView].

A new [RelaySession][relayreader.services.session.RelaySession] is created
for every ``connect`` since sessions are single-use.

Status texts:

| Situation                        | Text                                        | Severity |
|----------------------------------|---------------------------------------------|----------|
| connect without url              | ``please enter a relay url (wss://...)``    | warn     |
| malformed url                    | ``invalid websocket url: <reason>``         | err      |
| state CONNECTING / OPEN / CLOSED | ``connecting…`` / ``connected`` / ``disconnected`` | info / ok / info |
| query while not open             | ``not connected``                           | warn     |
| bad kind / limit                 | ``invalid kind (must be an integer ≥ 0)`` / ``invalid limit N`` | warn |
| request sent                     | ``requested events (kind K, limit N[, #t=v])…`` | info |
| transport rejected the write     | ``send failed: <reason>``                   | err      |
"""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import Any, Protocol, TypeAlias

from relayreader.core.exceptions import ConnectivityError, NotConnectedError, SendError
from relayreader.core.logger import Logger
from relayreader.models.article import ArticleRecord
from relayreader.models.constants import SessionState, Severity, StatusCode
from relayreader.models.filter import Filter
from relayreader.models.status import Status
from relayreader.utils.transport import WebSocketTransport

from .configs import ReaderConfig
from .session import RelaySession, SessionListener


SessionFactory: TypeAlias = Callable[[SessionListener], RelaySession]


class ReaderView(Protocol):
    """Display surface driven by a [Reader][relayreader.services.reader.Reader]."""

    def show_status(self, status: Status) -> None: ...

    def append_article(self, article: ArticleRecord) -> None: ...

    def clear_articles(self) -> None: ...

    def set_connected(self, connected: bool) -> None: ...


class NullView:
    """View that discards every update."""

    def show_status(self, status: Status) -> None:
        pass

    def append_article(self, article: ArticleRecord) -> None:
        pass

    def clear_articles(self) -> None:
        pass

    def set_connected(self, connected: bool) -> None:
        pass


def parse_int(value: Any) -> int | None:
    """Parse a form value as an integer; ``None`` when it is not one.

    Strings follow form-field number semantics: blank text is ``0`` and
    integral decimals such as ``"1.0"`` or ``"1e3"`` are accepted.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text)
        except ValueError:
            pass
        try:
            value = float(text)
        except ValueError:
            return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    return None


_STATE_STATUS: dict[SessionState, Status] = {
    SessionState.CONNECTING: Status(StatusCode.CONNECTING, "connecting…", Severity.INFO),
    SessionState.OPEN: Status(StatusCode.CONNECTED, "connected", Severity.OK),
    SessionState.CLOSED: Status(StatusCode.DISCONNECTED, "disconnected", Severity.INFO),
}


class Reader:
    """Query a relay and keep the rendered article list.

    Args:
        config: Defaults for the relay address and transport settings.
        view: Display surface; defaults to [NullView][relayreader.services.reader.NullView].
        session_factory: Builds a session for a listener; defaults to a
            [RelaySession][relayreader.services.session.RelaySession] over a
            [WebSocketTransport][relayreader.utils.transport.WebSocketTransport]
            configured from *config*.

    Examples:
        ```python
        reader = Reader(ReaderConfig(relay_url="wss://relay.example.com"))
        reader.connect()
        # ... once reader.is_connected
        await reader.query(30023, 10, "t", "nostr")
        # ... reader.articles fills up, reader.status -> "received all results"
        await reader.disconnect()
        ```
    """

    def __init__(
        self,
        config: ReaderConfig | None = None,
        *,
        view: ReaderView | None = None,
        session_factory: SessionFactory | None = None,
    ) -> None:
        self._config = config or ReaderConfig()
        self._view: ReaderView = view or NullView()
        self._session_factory = session_factory or self._default_session
        self._logger = Logger("reader")

        self._session: RelaySession | None = None
        self._articles: list[ArticleRecord] = []
        self._status = Status(StatusCode.DISCONNECTED, "disconnected", Severity.INFO)
        self._connected = False

    # -- Properties ----------------------------------------------------------

    @property
    def config(self) -> ReaderConfig:
        return self._config

    @property
    def session(self) -> RelaySession | None:
        return self._session

    @property
    def status(self) -> Status:
        """The current status line."""
        return self._status

    @property
    def articles(self) -> tuple[ArticleRecord, ...]:
        """Articles rendered for the current subscription, in arrival order."""
        return tuple(self._articles)

    @property
    def is_connected(self) -> bool:
        return self._connected

    # -- User actions --------------------------------------------------------

    def connect(self, url: str | None = None) -> bool:
        """Open a new session to *url* (default: ``config.relay_url``).

        Returns:
            ``True`` when a connection attempt started.
        """
        url = (url if url is not None else self._config.relay_url).strip()
        if not url:
            self._set_status(
                Status(
                    StatusCode.INVALID_INPUT,
                    "please enter a relay url (wss://...)",
                    Severity.WARN,
                )
            )
            return False
        if self._session is not None and self._session.state in (
            SessionState.CONNECTING,
            SessionState.OPEN,
        ):
            self._set_status(
                Status(
                    StatusCode.INVALID_INPUT,
                    "already connected; disconnect first",
                    Severity.WARN,
                )
            )
            return False

        session = self._session_factory(self)
        try:
            session.connect(url)
        except ConnectivityError as e:
            self._set_status(
                Status(StatusCode.INVALID_INPUT, f"invalid websocket url: {e}", Severity.ERROR)
            )
            return False
        self._session = session
        return True

    async def query(
        self,
        kind: Any,
        limit: Any,
        tag_name: str | None = None,
        tag_value: str | None = None,
    ) -> str | None:
        """Validate the query form values and issue a new subscription.

        The rendered list is cleared before validation, as soon as a
        connection is confirmed.

        Returns:
            The subscription id, or ``None`` when nothing was sent.
        """
        session = self._session
        if session is None or not session.is_open:
            self._set_status(Status(StatusCode.NOT_CONNECTED, "not connected", Severity.WARN))
            return None

        self.on_clear()

        parsed_kind = parse_int(kind)
        if parsed_kind is None or parsed_kind < 0:
            self._set_status(
                Status(
                    StatusCode.INVALID_INPUT,
                    "invalid kind (must be an integer ≥ 0)",
                    Severity.WARN,
                )
            )
            return None
        parsed_limit = parse_int(limit)
        if parsed_limit is None or parsed_limit < 1:
            self._set_status(Status(StatusCode.INVALID_INPUT, "invalid limit N", Severity.WARN))
            return None

        try:
            flt = Filter.from_query(parsed_kind, parsed_limit, tag_name, tag_value)
        except (TypeError, ValueError) as e:
            self._set_status(
                Status(StatusCode.INVALID_INPUT, f"invalid tag filter: {e}", Severity.WARN)
            )
            return None

        try:
            subscription_id = await session.subscribe(flt)
        except NotConnectedError:
            self._set_status(Status(StatusCode.NOT_CONNECTED, "not connected", Severity.WARN))
            return None
        except SendError as e:
            self._set_status(Status(StatusCode.SEND_FAILED, f"send failed: {e}", Severity.ERROR))
            return None

        self._set_status(
            Status(StatusCode.REQUESTED, f"requested events ({flt.describe()})…", Severity.INFO)
        )
        return subscription_id

    async def disconnect(self) -> None:
        """Close the current session. Safe to call in any state."""
        if self._session is not None:
            await self._session.disconnect()
        self._set_connected(False)
        if self._status.code is not StatusCode.DISCONNECTED:
            self._set_status(_STATE_STATUS[SessionState.CLOSED])

    # -- SessionListener -----------------------------------------------------

    def on_state_change(self, state: SessionState) -> None:
        self._set_connected(state is SessionState.OPEN)
        status = _STATE_STATUS.get(state)
        if status is not None:
            self._set_status(status)

    def on_status(self, status: Status) -> None:
        self._set_status(status)

    def on_article(self, article: ArticleRecord) -> None:
        self._articles.append(article)
        self._view.append_article(article)

    def on_clear(self) -> None:
        self._articles.clear()
        self._view.clear_articles()

    # -- Internals -----------------------------------------------------------

    def _default_session(self, listener: SessionListener) -> RelaySession:
        transport_factory = partial(
            WebSocketTransport,
            proxy_url=self._config.proxy_url,
            timeout=self._config.connect_timeout,
            close_timeout=self._config.close_timeout,
        )
        return RelaySession(listener, transport_factory=transport_factory)

    def _set_connected(self, connected: bool) -> None:
        if connected != self._connected:
            self._connected = connected
            self._view.set_connected(connected)

    def _set_status(self, status: Status) -> None:
        self._status = status
        self._logger.debug("status", code=status.code.value, text=status.text)
        self._view.show_status(status)
