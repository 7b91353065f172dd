"""CLI entry point for relayreader.

Connects to a relay, sends one subscription request, prints every
matching event as an article until the relay signals end of stored events
(or ``--wait`` seconds pass), then disconnects.

Examples:
    ```bash
    python -m relayreader --relay wss://relay.damus.io --kind 30023 --limit 5
    python -m relayreader --config config/reader.yaml --tag t=nostr --json
    python -m relayreader --log-level DEBUG
    ```
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, TextIO

import yaml

from relayreader.core.exceptions import ConfigurationError
from relayreader.core.logger import Logger, StructuredFormatter
from relayreader.core.yaml import load_yaml
from relayreader.models.article import ArticleRecord
from relayreader.models.constants import StatusCode
from relayreader.models.status import Status
from relayreader.services.configs import ReaderConfig
from relayreader.services.reader import Reader


DEFAULT_CONFIG = Path("config") / "reader.yaml"

logger = Logger("cli")


def format_article(article: ArticleRecord) -> str:
    """Render an article as a plain-text block."""
    when = article.timestamp.strftime("%Y-%m-%d %H:%M:%S UTC")
    lines = [f"## {article.title}", f"pubkey {article.author_display} · {when}"]
    if article.body:
        lines += ["", article.body]
    return "\n".join(lines) + "\n"


def article_to_json(article: ArticleRecord) -> str:
    """Render an article as one JSON line."""
    return json.dumps(
        {
            "title": article.title,
            "body": article.body,
            "author": article.author_display,
            "timestamp": article.timestamp.isoformat(),
        },
        ensure_ascii=False,
    )


class ConsoleView:
    """Terminal view: streams articles to stdout and status lines to stderr.

    Also exposes ``asyncio.Event`` flags so the CLI can wait for the
    connection to open and for the result set to be complete.
    """

    def __init__(
        self,
        *,
        json_output: bool = False,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self._json_output = json_output
        self._out = out or sys.stdout
        self._err = err or sys.stderr
        self.opened = asyncio.Event()
        self.closed = asyncio.Event()
        self.finished = asyncio.Event()
        self.count = 0

    def show_status(self, status: Status) -> None:
        print(str(status), file=self._err)
        if status.code is StatusCode.END_OF_STORED_EVENTS:
            self.finished.set()
        elif status.code is StatusCode.DISCONNECTED:
            self.closed.set()
            self.finished.set()

    def append_article(self, article: ArticleRecord) -> None:
        self.count += 1
        if self._json_output:
            print(article_to_json(article), file=self._out)
        else:
            print(format_article(article), file=self._out)

    def clear_articles(self) -> None:
        self.count = 0

    def set_connected(self, connected: bool) -> None:
        if connected:
            self.opened.set()


async def wait_for_any(*events: asyncio.Event, timeout: float) -> bool:  # noqa: ASYNC109
    """Wait until any of *events* is set. Returns ``False`` on timeout."""
    waiters = [asyncio.create_task(event.wait()) for event in events]
    try:
        done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for waiter in waiters:
            waiter.cancel()
    return bool(done)


async def run_reader(config: ReaderConfig, *, json_output: bool = False) -> int:
    """Connect, query once, wait for the results and disconnect.

    Returns:
        Exit code: 0 when the query was sent, 1 otherwise.
    """
    view = ConsoleView(json_output=json_output)
    reader = Reader(config, view=view)

    if not reader.connect():
        return 1

    try:
        await wait_for_any(view.opened, view.closed, timeout=config.wait)
        if not reader.is_connected:
            logger.error("relay_unreachable", url=config.relay_url, status=reader.status.text)
            return 1

        subscription_id = await reader.query(
            config.kind, config.limit, config.tag_name, config.tag_value
        )
        if subscription_id is None:
            return 1

        if not await wait_for_any(view.finished, timeout=config.wait):
            logger.warning("wait_expired", subscription_id=subscription_id, wait=config.wait)
        logger.info("query_completed", subscription_id=subscription_id, articles=view.count)
        return 0
    finally:
        await reader.disconnect()


def parse_tag(value: str) -> tuple[str, str]:
    """Parse a ``NAME=VALUE`` tag filter argument."""
    name, sep, tag_value = value.partition("=")
    if not sep or not name.strip() or not tag_value.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {value!r}")
    return name.strip(), tag_value.strip()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="relayreader",
        description="Read events from a Nostr relay as articles",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help=f"Config path (default: {DEFAULT_CONFIG})",
    )
    parser.add_argument("--relay", dest="relay_url", help="Relay URL (wss://...)")
    parser.add_argument("--kind", type=int, help="Event kind (integer >= 0)")
    parser.add_argument("--limit", type=int, help="Maximum number of events (>= 1)")
    parser.add_argument("--tag", type=parse_tag, metavar="NAME=VALUE", help="Tag filter")
    parser.add_argument("--wait", type=float, help="Seconds to wait for connect and EOSE")
    parser.add_argument("--proxy", dest="proxy_url", help="SOCKS5 proxy URL")
    parser.add_argument("--json", action="store_true", help="Print articles as JSON lines")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level (default: WARNING)",
    )
    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    """Install a ``StructuredFormatter`` on a stderr root handler."""
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level))


def build_config(args: argparse.Namespace) -> ReaderConfig:
    """Merge the YAML config (if present) with CLI overrides.

    Raises:
        ConfigurationError: If the file is invalid or a value fails validation.
    """
    data: dict[str, Any] = {}
    if args.config.exists():
        try:
            data = load_yaml(args.config)
        except (OSError, TypeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"cannot load {args.config}: {e}") from e
    elif args.config != DEFAULT_CONFIG:
        raise ConfigurationError(f"Config file not found: {args.config}")

    overrides = {
        "relay_url": args.relay_url,
        "kind": args.kind,
        "limit": args.limit,
        "wait": args.wait,
        "proxy_url": args.proxy_url,
    }
    if args.tag is not None:
        overrides["tag_name"], overrides["tag_value"] = args.tag
    data.update({k: v for k, v in overrides.items() if v is not None})
    return ReaderConfig.from_dict(data)


async def main(argv: list[str] | None = None) -> int:
    """Main entry point: parse args, build the config and run the reader."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = build_config(args)
    except ConfigurationError as e:
        logger.error("config_invalid", error=str(e))
        return 1

    try:
        return await run_reader(config, json_output=args.json)
    except KeyboardInterrupt:
        logger.info("interrupted")
        return 130


def cli() -> None:
    """Synchronous entry point for console_scripts."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
