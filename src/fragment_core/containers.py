"""Sequence and table encodings.

Tables are written in ascending key order and the decoder verifies that
order entry by entry. A stream that only decodes after re-sorting would
hash differently from its normalized re-encode, so it is rejected.
"""
from __future__ import annotations

from typing import Any, Callable, Iterable

from .cursor import Reader
from .errors import InsufficientBytes, UnorderedOrDuplicateKey
from .protocol import MIN_ELEMENT_LEN, MIN_ENTRY_LEN
from .scalar import decode_bytes, decode_length, encode_bytes, encode_compact

EncodeFn = Callable[[Any], bytes]
DecodeFn = Callable[[Reader], Any]


def _check_count(r: Reader, count: int, min_len: int, offset: int) -> None:
    # A count that cannot fit in what is left is a truncation, not an allocation.
    if count * min_len > r.remaining:
        raise InsufficientBytes(count * min_len, r.remaining, offset)


def encode_sequence(items: Iterable[Any], encode_item: EncodeFn) -> bytes:
    items = tuple(items)
    out = bytearray(encode_compact(len(items)))
    for item in items:
        out += encode_item(item)
    return bytes(out)


def decode_sequence(r: Reader, decode_item: DecodeFn) -> list:
    start = r.pos
    count = decode_length(r)
    _check_count(r, count, MIN_ELEMENT_LEN, start)
    return [decode_item(r) for _ in range(count)]


def encode_table(entries: Iterable[tuple[bytes, Any]], encode_value: EncodeFn) -> bytes:
    """Encode ``(key, value)`` pairs; ``entries`` must already be key-sorted."""
    entries = tuple(entries)
    out = bytearray(encode_compact(len(entries)))
    for key, value in entries:
        out += encode_bytes(key)
        out += encode_value(value)
    return bytes(out)


def decode_table(r: Reader, decode_value: DecodeFn) -> list[tuple[bytes, Any]]:
    start = r.pos
    count = decode_length(r)
    _check_count(r, count, MIN_ENTRY_LEN, start)
    entries: list[tuple[bytes, Any]] = []
    previous: bytes | None = None
    for _ in range(count):
        key_offset = r.pos
        key = decode_bytes(r)
        if previous is not None and key <= previous:
            raise UnorderedOrDuplicateKey(key, previous, key_offset)
        entries.append((key, decode_value(r)))
        previous = key
    return entries
