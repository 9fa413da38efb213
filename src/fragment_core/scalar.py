"""Leaf encodings: compact varints, length-prefixed bytes, hashes, format tags."""
from __future__ import annotations

from .cursor import Reader
from .errors import InvalidLength
from .model import AudioFormats, FragmentHash, ImageFormats
from .protocol import (
    COMPACT_BIG,
    COMPACT_BIG_MAX_BYTES,
    COMPACT_FOUR,
    COMPACT_FOUR_MAX,
    COMPACT_SINGLE,
    COMPACT_SINGLE_MAX,
    COMPACT_TWO,
    COMPACT_TWO_MAX,
    FRAGMENT_HASH_LEN,
    MAX_LENGTH,
)
from .tags import AUDIO_FORMATS, IMAGE_FORMATS, TagRegistry


def encode_compact(n: int) -> bytes:
    """SCALE compact unsigned integer, always the shortest form."""
    if n < 0:
        raise ValueError("compact integers are unsigned")
    if n <= COMPACT_SINGLE_MAX:
        return bytes([(n << 2) | COMPACT_SINGLE])
    if n <= COMPACT_TWO_MAX:
        return ((n << 2) | COMPACT_TWO).to_bytes(2, "little")
    if n <= COMPACT_FOUR_MAX:
        return ((n << 2) | COMPACT_FOUR).to_bytes(4, "little")
    size = max(4, (n.bit_length() + 7) // 8)
    if size > COMPACT_BIG_MAX_BYTES:
        raise ValueError(f"{n} does not fit a compact integer")
    return bytes([((size - 4) << 2) | COMPACT_BIG]) + n.to_bytes(size, "little")


def decode_compact(r: Reader) -> int:
    start = r.pos
    first = r.read_byte()
    mode = first & 0b11
    if mode == COMPACT_SINGLE:
        return first >> 2
    if mode == COMPACT_TWO:
        value = int.from_bytes(bytes([first]) + r.read(1), "little") >> 2
        floor = COMPACT_SINGLE_MAX
    elif mode == COMPACT_FOUR:
        value = int.from_bytes(bytes([first]) + r.read(3), "little") >> 2
        floor = COMPACT_TWO_MAX
    else:
        size = (first >> 2) + 4
        raw = r.read(size)
        if size > 4 and raw[-1] == 0:
            raise InvalidLength(f"compact integer padded to {size} bytes", start)
        value = int.from_bytes(raw, "little")
        floor = COMPACT_FOUR_MAX
    if value <= floor:
        raise InvalidLength(f"compact integer {value} not in shortest form", start)
    return value


def decode_length(r: Reader) -> int:
    """Read a length/count prefix, bounded to u32."""
    start = r.pos
    n = decode_compact(r)
    if n > MAX_LENGTH:
        raise InvalidLength(f"length {n} exceeds {MAX_LENGTH}", start)
    return n


def encode_bytes(value: bytes) -> bytes:
    return encode_compact(len(value)) + value


def decode_bytes(r: Reader) -> bytes:
    n = decode_length(r)
    return r.read(n)


def encode_hash(value: FragmentHash) -> bytes:
    return value.digest


def decode_hash(r: Reader) -> FragmentHash:
    return FragmentHash(r.read(FRAGMENT_HASH_LEN))


def encode_tag(registry: TagRegistry, variant) -> bytes:
    return bytes([registry.tag_for(variant)])


def decode_tag(r: Reader, registry: TagRegistry):
    offset = r.pos
    return registry.variant_for(r.read_byte(), offset)


def encode_audio_format(value: AudioFormats) -> bytes:
    return encode_tag(AUDIO_FORMATS, value)


def decode_audio_format(r: Reader) -> AudioFormats:
    return decode_tag(r, AUDIO_FORMATS)


def encode_image_format(value: ImageFormats) -> bytes:
    return encode_tag(IMAGE_FORMATS, value)


def decode_image_format(r: Reader) -> ImageFormats:
    return decode_tag(r, IMAGE_FORMATS)
