"""Byte cursor shared by every decoder."""
from __future__ import annotations

from .errors import InsufficientBytes, TrailingBytes


class Reader:
    """Forward-only view over an immutable input buffer."""

    __slots__ = ("_buf", "pos")

    def __init__(self, data: bytes | bytearray | memoryview):
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"decoder input must be bytes, got {type(data).__name__}")
        self._buf = memoryview(bytes(data))
        self.pos = 0

    @property
    def remaining(self) -> int:
        return len(self._buf) - self.pos

    def require(self, n: int) -> None:
        if n > self.remaining:
            raise InsufficientBytes(n, self.remaining, self.pos)

    def read(self, n: int) -> bytes:
        self.require(n)
        out = self._buf[self.pos:self.pos + n].tobytes()
        self.pos += n
        return out

    def read_byte(self) -> int:
        self.require(1)
        b = self._buf[self.pos]
        self.pos += 1
        return b

    def finish(self) -> None:
        if self.remaining:
            raise TrailingBytes(self.remaining, self.pos)
