"""Decode failure kinds.

Every failure is a ``DecodeError`` carrying a stable ``code`` and the byte
offset where it was detected. Decoding never returns a partial value.
"""
from __future__ import annotations

ERRORS = {
    "E_INSUFFICIENT_BYTES": "Input ended before a declared field was complete",
    "E_INVALID_TAG": "Discriminant byte outside the known set",
    "E_UNORDERED_KEY": "Table keys not in strictly ascending order",
    "E_DEPTH_EXCEEDED": "Nesting deeper than the configured limit",
    "E_TRAILING_BYTES": "Extra bytes after a complete value",
    "E_INVALID_LENGTH": "Length prefix is non-minimal or over the limit",
}


class DecodeError(ValueError):
    code = "E_DECODE"

    def __init__(self, detail: str, offset: int = 0):
        self.detail = detail
        self.offset = offset
        super().__init__(f"{self.code} at offset {offset}: {detail}")

    @property
    def message(self) -> str:
        return ERRORS.get(self.code, "Decode failed")

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "offset": self.offset, "detail": self.detail}


class InsufficientBytes(DecodeError):
    code = "E_INSUFFICIENT_BYTES"

    def __init__(self, needed: int, available: int, offset: int):
        self.needed = needed
        self.available = available
        super().__init__(f"need {needed} bytes, {available} available", offset)


class InvalidTag(DecodeError):
    code = "E_INVALID_TAG"

    def __init__(self, registry: str, tag: int, offset: int):
        self.registry = registry
        self.tag = tag
        super().__init__(f"{tag:#04x} is not a {registry} discriminant", offset)


class UnorderedOrDuplicateKey(DecodeError):
    code = "E_UNORDERED_KEY"

    def __init__(self, key: bytes, previous: bytes, offset: int):
        self.key = key
        self.previous = previous
        super().__init__(f"key {key!r} does not follow {previous!r}", offset)


class DepthExceeded(DecodeError):
    """Raised on decode, and on encode of an over-deep in-memory tree."""

    code = "E_DEPTH_EXCEEDED"

    def __init__(self, limit: int, offset: int = 0):
        self.limit = limit
        super().__init__(f"nesting exceeds {limit} levels", offset)


class TrailingBytes(DecodeError):
    code = "E_TRAILING_BYTES"

    def __init__(self, count: int, offset: int):
        self.count = count
        super().__init__(f"{count} unconsumed bytes", offset)


class InvalidLength(DecodeError):
    code = "E_INVALID_LENGTH"
