"""Fragment data model.

Plain immutable values. Nested ``FragmentData`` is owned by its parent;
cross-fragment links are ``FragmentHash`` addresses only.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Iterator, Union

from .protocol import FRAGMENT_HASH_LEN


def _as_bytes(value: Any, what: str) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"{what} must be bytes, got {type(value).__name__}")


@dataclass(frozen=True)
class FragmentHash:
    """32-byte content address of a canonically encoded fragment."""

    digest: bytes

    def __post_init__(self) -> None:
        digest = _as_bytes(self.digest, "FragmentHash digest")
        if len(digest) != FRAGMENT_HASH_LEN:
            raise ValueError(f"FragmentHash must be {FRAGMENT_HASH_LEN} bytes, got {len(digest)}")
        object.__setattr__(self, "digest", digest)

    def hex(self) -> str:
        return self.digest.hex()

    @classmethod
    def fromhex(cls, text: str) -> FragmentHash:
        return cls(bytes.fromhex(text))

    def __repr__(self) -> str:
        return f"FragmentHash({self.hex()})"


# Values are the wire discriminants. Append only.
class AudioFormats(IntEnum):
    Ogg = 0
    Mp3 = 1
    Wav = 2


class ImageFormats(IntEnum):
    Jpeg = 0
    Png = 1


@dataclass(frozen=True)
class EdnData:
    text: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "text", _as_bytes(self.text, "EdnData.text"))


@dataclass(frozen=True)
class AudioData:
    format: AudioFormats
    data: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.format, AudioFormats):
            raise TypeError(f"AudioData.format must be AudioFormats, got {self.format!r}")
        object.__setattr__(self, "data", _as_bytes(self.data, "AudioData.data"))


@dataclass(frozen=True)
class ImageData:
    format: ImageFormats
    data: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.format, ImageFormats):
            raise TypeError(f"ImageData.format must be ImageFormats, got {self.format!r}")
        object.__setattr__(self, "data", _as_bytes(self.data, "ImageData.data"))


class SortedByteMap(Mapping):
    """Immutable byte-keyed mapping that always iterates in ascending key order.

    Accepts a mapping or an iterable of ``(key, value)`` pairs in any order.
    Later duplicates replace earlier ones, so the stored keys are unique.
    """

    __slots__ = ("_entries", "_index")

    def __init__(self, entries: Mapping | Iterable[tuple[bytes, Any]] = ()):
        pairs = entries.items() if isinstance(entries, Mapping) else entries
        index: dict[bytes, Any] = {}
        for key, value in pairs:
            index[_as_bytes(key, f"{type(self).__name__} key")] = self._check_value(value)
        self._entries = tuple(sorted(index.items(), key=lambda kv: kv[0]))
        self._index = index

    @classmethod
    def _from_sorted(cls, entries: list[tuple[bytes, Any]]):
        # Caller guarantees strictly ascending, already validated keys.
        obj = cls.__new__(cls)
        obj._entries = tuple(entries)
        obj._index = dict(entries)
        return obj

    def _check_value(self, value: Any) -> Any:
        return value

    def __getitem__(self, key: bytes) -> Any:
        return self._index[key]

    def __iter__(self) -> Iterator[bytes]:
        return (k for k, _ in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> tuple[tuple[bytes, Any], ...]:
        return self._entries

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._entries))

    def __repr__(self) -> str:
        body = ", ".join(f"{k!r}: {v!r}" for k, v in self._entries)
        return f"{type(self).__name__}({{{body}}})"


class Attributes(SortedByteMap):
    """Metadata attribute map, bytes to bytes."""

    __slots__ = ()

    def _check_value(self, value: Any) -> bytes:
        return _as_bytes(value, "attribute value")


class Table(SortedByteMap):
    """Ordered map from byte-string key to nested FragmentData."""

    __slots__ = ()

    def _check_value(self, value: Any) -> Any:
        if not isinstance(value, FRAGMENT_DATA_TYPES):
            raise TypeError(f"Table value must be FragmentData, got {type(value).__name__}")
        return value


@dataclass(frozen=True)
class Sequence:
    items: tuple = ()

    def __post_init__(self) -> None:
        items = tuple(self.items)
        for item in items:
            if not isinstance(item, FRAGMENT_DATA_TYPES):
                raise TypeError(f"Sequence item must be FragmentData, got {type(item).__name__}")
        object.__setattr__(self, "items", items)

    def __iter__(self) -> Iterator:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


FragmentData = Union[EdnData, AudioData, ImageData, Sequence, Table]
FRAGMENT_DATA_TYPES = (EdnData, AudioData, ImageData, Sequence, Table)


@dataclass(frozen=True)
class NoPreview:
    pass


@dataclass(frozen=True)
class ImagePreview:
    """Weak reference to another fragment holding the preview image."""

    target: FragmentHash

    def __post_init__(self) -> None:
        if not isinstance(self.target, FragmentHash):
            raise TypeError("ImagePreview.target must be a FragmentHash")


FragmentPreview = Union[NoPreview, ImagePreview]
NO_PREVIEW = NoPreview()


@dataclass(frozen=True)
class FragmentMetadata:
    name: bytes
    description: bytes = b""
    attributes: Attributes = field(default_factory=Attributes)
    preview: FragmentPreview = NO_PREVIEW

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _as_bytes(self.name, "FragmentMetadata.name"))
        object.__setattr__(self, "description", _as_bytes(self.description, "FragmentMetadata.description"))
        if not isinstance(self.attributes, Attributes):
            object.__setattr__(self, "attributes", Attributes(self.attributes))
        if not isinstance(self.preview, (NoPreview, ImagePreview)):
            raise TypeError(f"FragmentMetadata.preview must be a FragmentPreview, got {self.preview!r}")


@dataclass(frozen=True)
class Fragment:
    metadata: FragmentMetadata
    data: FragmentData

    def __post_init__(self) -> None:
        if not isinstance(self.data, FRAGMENT_DATA_TYPES):
            raise TypeError(f"Fragment.data must be FragmentData, got {type(self.data).__name__}")


def nesting_depth(data: FragmentData) -> int:
    """Number of FragmentData levels on the longest path; a leaf is 1.

    Walks an explicit stack so arbitrarily deep in-memory trees are safe.
    """
    deepest = 0
    stack = [(data, 1)]
    while stack:
        node, depth = stack.pop()
        deepest = max(deepest, depth)
        if isinstance(node, Sequence):
            stack.extend((child, depth + 1) for child in node.items)
        elif isinstance(node, Table):
            stack.extend((child, depth + 1) for child in node.values())
    return deepest
