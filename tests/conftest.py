"""
Pytest configuration and shared fixtures for relayreader tests.

Provides:
- FakeTransport: in-memory transport recording sent frames
- RecordingListener: SessionListener capturing every callback
- Sample event payloads and frames
"""

import json
import logging
from typing import Any

import pytest

from relayreader.models.relay import Relay
from relayreader.services.session import RelaySession


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


# ============================================================================
# Fakes
# ============================================================================


class FakeTransport:
    """Transport double: validates the URL and records outbound frames."""

    def __init__(self, url: str, listener: Any) -> None:
        self.relay = Relay(url)
        self.listener = listener
        self.sent: list[str] = []
        self.closed = False
        self.send_error: BaseException | None = None
        self.close_error: BaseException | None = None

    async def send(self, text: str) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(text)

    async def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error

    # Helpers driving the listener as the network would

    def open(self) -> None:
        self.listener.handle_open()

    def receive(self, frame: Any) -> None:
        self.listener.handle_message(frame if isinstance(frame, str) else json.dumps(frame))

    def fail(self, error: BaseException | None = None) -> None:
        self.listener.handle_error(error or ConnectionError("boom"))

    def drop(self) -> None:
        self.listener.handle_close()

    @property
    def frames(self) -> list[list[Any]]:
        return [json.loads(text) for text in self.sent]


class FakeTransportFactory:
    """Callable factory remembering every transport it built."""

    def __init__(self) -> None:
        self.created: list[FakeTransport] = []

    def __call__(self, url: str, listener: Any) -> FakeTransport:
        transport = FakeTransport(url, listener)
        self.created.append(transport)
        return transport

    @property
    def last(self) -> FakeTransport:
        return self.created[-1]


class RecordingListener:
    """SessionListener collecting every callback in order."""

    def __init__(self) -> None:
        self.states: list[Any] = []
        self.statuses: list[Any] = []
        self.articles: list[Any] = []
        self.clears = 0
        self.calls: list[str] = []

    def on_state_change(self, state: Any) -> None:
        self.states.append(state)
        self.calls.append(f"state:{state.value}")

    def on_status(self, status: Any) -> None:
        self.statuses.append(status)
        self.calls.append(f"status:{status.code.value}")

    def on_article(self, article: Any) -> None:
        self.articles.append(article)
        self.calls.append("article")

    def on_clear(self) -> None:
        self.clears += 1
        self.calls.append("clear")


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def transport_factory() -> FakeTransportFactory:
    """Fresh fake transport factory."""
    return FakeTransportFactory()


@pytest.fixture
def listener() -> RecordingListener:
    """Fresh recording listener."""
    return RecordingListener()


@pytest.fixture
def session(listener: RecordingListener, transport_factory: FakeTransportFactory) -> RelaySession:
    """Idle session wired to a recording listener and fake transports."""
    counter = iter(range(1, 1000))
    return RelaySession(
        listener,
        transport_factory=transport_factory,
        id_factory=lambda: f"sub-{next(counter)}",
    )


@pytest.fixture
def open_session(session: RelaySession, transport_factory: FakeTransportFactory) -> RelaySession:
    """Session connected to ``wss://relay.example.com`` and already OPEN."""
    session.connect("wss://relay.example.com")
    transport_factory.last.open()
    return session


@pytest.fixture
def sample_event() -> dict[str, Any]:
    """Well-formed long-form event payload."""
    return {
        "id": "a" * 64,
        "pubkey": "b" * 64,
        "created_at": 1700000000,
        "kind": 30023,
        "tags": [["d", "intro"], ["title", "Hello Nostr"], ["t", "nostr"]],
        "content": "Hello Nostr\n\nFirst paragraph.",
        "sig": "c" * 128,
    }
