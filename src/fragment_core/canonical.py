"""Canonical-form check: decode, re-encode, compare byte for byte.

Meant for conformance testing and tooling, not the hot path.
"""
from __future__ import annotations

from .composer import DEFAULT_CODEC, FragmentCodec
from .errors import DecodeError


def reencode(data: bytes, *, data_only: bool = False, codec: FragmentCodec = DEFAULT_CODEC) -> bytes:
    """Return the canonical encoding of whatever ``data`` decodes to."""
    if data_only:
        return codec.encode_data(codec.decode_data(data))
    return codec.encode(codec.decode(data))


def is_canonical(data: bytes, *, data_only: bool = False, codec: FragmentCodec = DEFAULT_CODEC) -> bool:
    """True when ``data`` is exactly the unique encoding of its decoded value.

    Undecodable input is not the canonical form of anything.
    """
    try:
        return reencode(data, data_only=data_only, codec=codec) == bytes(data)
    except DecodeError:
        return False
