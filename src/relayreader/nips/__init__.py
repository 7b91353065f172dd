"""Nostr protocol (NIP) implementations.

Attributes:
    nip01: Client/relay framing -- ``REQ``/``CLOSE`` encoding and parsing of
        ``EVENT``/``EOSE``/``OK``/``NOTICE`` relay frames.
"""

from relayreader.nips.nip01 import encode_close, encode_req, parse_relay_message


__all__ = [
    "encode_close",
    "encode_req",
    "parse_relay_message",
]
