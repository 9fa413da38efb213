"""Tag registries: stable single-byte discriminants for every closed union."""
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Hashable

from . import protocol
from .errors import InvalidTag
from .model import (
    AudioData,
    AudioFormats,
    EdnData,
    ImageData,
    ImageFormats,
    ImagePreview,
    NoPreview,
    Sequence,
    Table,
)


class TagRegistry:
    """Injective variant <-> byte mapping for one enumeration.

    Built once at import time and never mutated.
    """

    __slots__ = ("name", "_tags", "_variants")

    def __init__(self, name: str, tags: dict[Hashable, int]):
        variants: dict[int, Hashable] = {}
        for variant, tag in tags.items():
            if not 0 <= tag <= 0xFF:
                raise ValueError(f"{name}: tag {tag} for {variant!r} is not a single byte")
            if tag in variants:
                raise ValueError(f"{name}: tag {tag} assigned to both {variants[tag]!r} and {variant!r}")
            variants[tag] = variant
        self.name = name
        self._tags = MappingProxyType(dict(tags))
        self._variants = MappingProxyType(variants)

    def tag_for(self, variant: Hashable) -> int:
        try:
            return self._tags[variant]
        except KeyError:
            raise TypeError(f"{variant!r} is not a {self.name} variant") from None

    def variant_for(self, tag: int, offset: int = 0) -> Any:
        try:
            return self._variants[tag]
        except KeyError:
            raise InvalidTag(self.name, tag, offset) from None

    def describe(self) -> dict[str, int]:
        out = {}
        for tag in sorted(self._variants):
            variant = self._variants[tag]
            out[variant.name if isinstance(variant, Enum) else variant.__name__] = tag
        return out


AUDIO_FORMATS = TagRegistry("AudioFormats", {f: f.value for f in AudioFormats})
IMAGE_FORMATS = TagRegistry("ImageFormats", {f: f.value for f in ImageFormats})

FRAGMENT_DATA = TagRegistry(
    "FragmentData",
    {
        EdnData: protocol.TAG_EDN,
        AudioData: protocol.TAG_AUDIO,
        ImageData: protocol.TAG_IMAGE,
        Sequence: protocol.TAG_SEQUENCE,
        Table: protocol.TAG_TABLE,
    },
)

FRAGMENT_PREVIEW = TagRegistry(
    "FragmentPreview",
    {
        NoPreview: protocol.TAG_PREVIEW_NONE,
        ImagePreview: protocol.TAG_PREVIEW_IMAGE,
    },
)

REGISTRIES = (FRAGMENT_DATA, AUDIO_FORMATS, IMAGE_FORMATS, FRAGMENT_PREVIEW)
