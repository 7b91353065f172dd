"""
Unit tests for the CLI entry point (relayreader.__main__).

Tests:
- parse_tag() and parse_args()
- build_config() YAML loading and CLI overrides
- format_article() / article_to_json() rendering
- ConsoleView output and completion flags
- run_reader() and main() with a mocked Reader
"""

import argparse
import io
import json
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from relayreader.__main__ import (
    DEFAULT_CONFIG,
    ConsoleView,
    article_to_json,
    build_config,
    format_article,
    main,
    parse_args,
    parse_tag,
    run_reader,
)
from relayreader.core.exceptions import ConfigurationError
from relayreader.models.article import ArticleRecord
from relayreader.models.constants import Severity, StatusCode
from relayreader.models.status import Status
from relayreader.services.configs import ReaderConfig


ARTICLE = ArticleRecord(
    title="Hello",
    body="world",
    author_display="0123456789ab",
    timestamp=datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC),
)


# ============================================================================
# Argument parsing
# ============================================================================


class TestParseTag:
    """parse_tag() NAME=VALUE parsing."""

    def test_valid(self):
        """Name and value are split and stripped."""
        assert parse_tag(" t = nostr ") == ("t", "nostr")

    def test_value_with_equals(self):
        """Only the first '=' separates."""
        assert parse_tag("d=a=b") == ("d", "a=b")

    @pytest.mark.parametrize("value", ["t", "=nostr", "t=", " = "])
    def test_invalid(self, value):
        """Missing name, value or separator is rejected."""
        with pytest.raises(argparse.ArgumentTypeError):
            parse_tag(value)


class TestParseArgs:
    """parse_args() defaults and flags."""

    def test_defaults(self):
        """No flags gives the default config path and no overrides."""
        args = parse_args([])
        assert args.config == DEFAULT_CONFIG
        assert args.relay_url is None
        assert args.kind is None
        assert args.tag is None
        assert args.json is False
        assert args.log_level == "WARNING"

    def test_all_flags(self):
        """Every flag is parsed into its destination."""
        args = parse_args(
            [
                "--relay", "wss://relay.example.com",
                "--kind", "1",
                "--limit", "5",
                "--tag", "t=nostr",
                "--wait", "2.5",
                "--proxy", "socks5://127.0.0.1:9050",
                "--json",
                "--log-level", "DEBUG",
            ]
        )
        assert args.relay_url == "wss://relay.example.com"
        assert (args.kind, args.limit, args.wait) == (1, 5, 2.5)
        assert args.tag == ("t", "nostr")
        assert args.proxy_url == "socks5://127.0.0.1:9050"
        assert args.json is True
        assert args.log_level == "DEBUG"

    def test_bad_tag_exits(self):
        """An invalid --tag is an argparse error."""
        with pytest.raises(SystemExit):
            parse_args(["--tag", "nostr"])


# ============================================================================
# build_config()
# ============================================================================


class TestBuildConfig:
    """build_config() merges YAML and CLI flags."""

    def test_missing_default_config(self, tmp_path, monkeypatch):
        """A missing default config falls back to built-in defaults."""
        monkeypatch.chdir(tmp_path)
        config = build_config(parse_args([]))
        assert config == ReaderConfig()

    def test_missing_explicit_config(self, tmp_path):
        """A missing explicit config is an error."""
        with pytest.raises(ConfigurationError, match="not found"):
            build_config(parse_args(["--config", str(tmp_path / "nope.yaml")]))

    def test_yaml_then_overrides(self, tmp_path):
        """CLI flags override YAML values."""
        path = tmp_path / "reader.yaml"
        path.write_text("relay_url: ws://localhost:7777\nkind: 1\nlimit: 3\n", encoding="utf-8")
        config = build_config(
            parse_args(["--config", str(path), "--limit", "9", "--tag", "t=nostr"])
        )
        assert config.relay_url == "ws://localhost:7777"
        assert config.kind == 1
        assert config.limit == 9
        assert (config.tag_name, config.tag_value) == ("t", "nostr")

    def test_invalid_yaml(self, tmp_path):
        """Unreadable YAML is a configuration error."""
        path = tmp_path / "reader.yaml"
        path.write_text("kind: [\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="cannot load"):
            build_config(parse_args(["--config", str(path)]))

    def test_invalid_override(self, tmp_path):
        """Overrides are validated."""
        path = tmp_path / "reader.yaml"
        path.write_text("{}\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            build_config(parse_args(["--config", str(path), "--limit", "0"]))


# ============================================================================
# Rendering
# ============================================================================


class TestRendering:
    """format_article() and article_to_json()."""

    def test_format_article(self):
        """Heading, metadata line, blank line and body."""
        assert format_article(ARTICLE) == (
            "## Hello\npubkey 0123456789ab · 2023-11-14 22:13:20 UTC\n\nworld\n"
        )

    def test_format_article_without_body(self):
        """Empty bodies omit the body block."""
        article = ArticleRecord("T", "", "unknown", datetime(1970, 1, 1, tzinfo=UTC))
        assert format_article(article) == "## T\npubkey unknown · 1970-01-01 00:00:00 UTC\n"

    def test_article_to_json(self):
        """All fields are present with an ISO timestamp."""
        assert json.loads(article_to_json(ARTICLE)) == {
            "title": "Hello",
            "body": "world",
            "author": "0123456789ab",
            "timestamp": "2023-11-14T22:13:20+00:00",
        }


class TestConsoleView:
    """ConsoleView output and flags."""

    def test_status_to_err(self):
        """Statuses are printed to the error stream."""
        out, err = io.StringIO(), io.StringIO()
        view = ConsoleView(out=out, err=err)
        view.show_status(Status(StatusCode.CONNECTED, "connected", Severity.OK))
        assert err.getvalue() == "status: connected\n"
        assert out.getvalue() == ""

    def test_eose_finishes(self):
        """End of stored events sets finished only."""
        view = ConsoleView(out=io.StringIO(), err=io.StringIO())
        view.show_status(Status(StatusCode.END_OF_STORED_EVENTS, "received all results"))
        assert view.finished.is_set()
        assert not view.closed.is_set()

    def test_disconnect_closes(self):
        """A disconnect sets both closed and finished."""
        view = ConsoleView(out=io.StringIO(), err=io.StringIO())
        view.show_status(Status(StatusCode.DISCONNECTED, "disconnected"))
        assert view.closed.is_set()
        assert view.finished.is_set()

    def test_articles_counted(self):
        """Articles are printed and counted; clearing resets the count."""
        out = io.StringIO()
        view = ConsoleView(out=out, err=io.StringIO())
        view.append_article(ARTICLE)
        view.append_article(ARTICLE)
        assert view.count == 2
        assert out.getvalue().count("## Hello") == 2
        view.clear_articles()
        assert view.count == 0

    def test_json_output(self):
        """JSON mode prints one object per line."""
        out = io.StringIO()
        view = ConsoleView(json_output=True, out=out, err=io.StringIO())
        view.append_article(ARTICLE)
        assert json.loads(out.getvalue())["title"] == "Hello"

    def test_connected_flag(self):
        """set_connected(True) sets opened."""
        view = ConsoleView(out=io.StringIO(), err=io.StringIO())
        view.set_connected(False)
        assert not view.opened.is_set()
        view.set_connected(True)
        assert view.opened.is_set()


# ============================================================================
# run_reader() / main()
# ============================================================================


def fake_reader(view, *, opens=True, sub_id="sub-1", finishes=True):
    """Reader double driving the ConsoleView the way a session would."""
    reader = MagicMock()
    reader.is_connected = False
    reader.status = Status(StatusCode.TRANSPORT_ERROR, "websocket error", Severity.ERROR)

    def connect():
        if opens:
            reader.is_connected = True
            view.set_connected(True)
        else:
            view.show_status(Status(StatusCode.DISCONNECTED, "disconnected"))
        return True

    async def query(kind, limit, tag_name, tag_value):
        if finishes:
            view.append_article(ARTICLE)
            view.show_status(Status(StatusCode.END_OF_STORED_EVENTS, "received all results"))
        return sub_id

    reader.connect = MagicMock(side_effect=connect)
    reader.query = AsyncMock(side_effect=query)
    reader.disconnect = AsyncMock()
    return reader


class TestRunReader:
    """run_reader() orchestration."""

    def _factory(self, **reader_kwargs):
        views = []

        def make_reader(cfg, view):
            views.append(view)
            return fake_reader(view, **reader_kwargs)

        return make_reader, views

    @pytest.mark.asyncio
    async def test_success(self, capsys):
        """Connect, query, print and disconnect."""
        config = ReaderConfig(wait=1.0)
        make_reader, views = self._factory()
        with patch("relayreader.__main__.Reader", side_effect=make_reader):
            code = await run_reader(config)
        assert code == 0
        assert views[0].count == 1
        assert "## Hello" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_unreachable(self):
        """A relay that never opens gives exit code 1."""
        config = ReaderConfig(wait=1.0)
        make_reader, _ = self._factory(opens=False)
        with patch("relayreader.__main__.Reader", side_effect=make_reader):
            code = await run_reader(config)
        assert code == 1

    @pytest.mark.asyncio
    async def test_query_not_sent(self):
        """A refused query gives exit code 1."""
        config = ReaderConfig(wait=1.0)
        make_reader, _ = self._factory(sub_id=None, finishes=False)
        with patch("relayreader.__main__.Reader", side_effect=make_reader):
            assert await run_reader(config) == 1

    @pytest.mark.asyncio
    async def test_wait_expires(self):
        """Missing EOSE still returns 0 after the wait."""
        config = ReaderConfig(wait=0.01)
        make_reader, _ = self._factory(finishes=False)
        with patch("relayreader.__main__.Reader", side_effect=make_reader):
            assert await run_reader(config) == 0

    @pytest.mark.asyncio
    async def test_connect_refused(self):
        """An invalid address returns 1 without disconnecting."""
        reader = MagicMock()
        reader.connect = MagicMock(return_value=False)
        reader.disconnect = AsyncMock()
        with patch("relayreader.__main__.Reader", return_value=reader):
            assert await run_reader(ReaderConfig()) == 1
        reader.disconnect.assert_not_awaited()


class TestMain:
    """main() entry point."""

    @pytest.mark.asyncio
    async def test_invalid_config(self, tmp_path):
        """Configuration errors give exit code 1."""
        with patch("relayreader.__main__.setup_logging"):
            assert await main(["--config", str(tmp_path / "missing.yaml")]) == 1

    @pytest.mark.asyncio
    async def test_runs_reader(self, tmp_path, monkeypatch):
        """Valid arguments run the reader with the merged config."""
        monkeypatch.chdir(tmp_path)
        run = AsyncMock(return_value=0)
        with (
            patch("relayreader.__main__.setup_logging"),
            patch("relayreader.__main__.run_reader", run),
        ):
            assert await main(["--kind", "1", "--json"]) == 0
        config = run.await_args.args[0]
        assert config.kind == 1
        assert run.await_args.kwargs == {"json_output": True}
