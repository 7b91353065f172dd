r"""relayreader -- minimal Nostr relay client rendering events as articles.

Opens one WebSocket connection to a relay, sends a single ``REQ`` with a
filter, and projects every matching event into a title/body article.

Layers (imports flow strictly downward):

```text
               services        RelaySession, Reader, ReaderConfig
              /    |    \
          core   nips   utils  exceptions/logging/yaml, NIP-01, transport
              \    |    /
               models          Pure frozen dataclasses (zero I/O)
```

Note:
    Top-level imports (``from relayreader import Reader``) use lazy
    loading and resolve on first access.
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("relayreader")

__all__ = [
    "ArticleRecord",
    "Filter",
    "Logger",
    "NostrEvent",
    "Reader",
    "ReaderConfig",
    "RelaySession",
    "SessionState",
    "Status",
    "project_article",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "ArticleRecord": ("relayreader.models", "ArticleRecord"),
    "Filter": ("relayreader.models", "Filter"),
    "NostrEvent": ("relayreader.models", "NostrEvent"),
    "SessionState": ("relayreader.models", "SessionState"),
    "Status": ("relayreader.models", "Status"),
    "project_article": ("relayreader.models", "project_article"),
    "Logger": ("relayreader.core", "Logger"),
    "Reader": ("relayreader.services", "Reader"),
    "ReaderConfig": ("relayreader.services", "ReaderConfig"),
    "RelaySession": ("relayreader.services", "RelaySession"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value  # Cache for subsequent access
        return value
    raise AttributeError(f"module 'relayreader' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
