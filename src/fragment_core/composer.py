"""Recursive encode/decode of FragmentData trees and the Fragment envelope.

Byte layout:

    Fragment          = FragmentMetadata FragmentData
    FragmentMetadata  = bytes(name) bytes(description) table(attributes) preview
    FragmentData      = tag payload
    FragmentPreview   = tag [32-byte hash]

Every nested FragmentData entry increments a depth counter. The limit is
checked before the tag byte is read, so an over-deep stream is rejected no
matter how much input remains.
"""
from __future__ import annotations

from . import scalar
from .containers import decode_sequence, decode_table, encode_sequence, encode_table
from .cursor import Reader
from .errors import DepthExceeded
from .model import (
    NO_PREVIEW,
    Attributes,
    AudioData,
    EdnData,
    Fragment,
    FragmentData,
    FragmentMetadata,
    FragmentPreview,
    ImageData,
    ImagePreview,
    Sequence,
    Table,
)
from .protocol import DEFAULT_MAX_DEPTH, HARD_MAX_DEPTH
from .tags import FRAGMENT_DATA, FRAGMENT_PREVIEW


class FragmentCodec:
    """Stateless codec bound to one depth limit. Safe to share between threads."""

    __slots__ = ("max_depth",)

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        if not 1 <= max_depth <= HARD_MAX_DEPTH:
            raise ValueError(f"max_depth must be in 1..{HARD_MAX_DEPTH}, got {max_depth}")
        self.max_depth = max_depth

    def __repr__(self) -> str:
        return f"FragmentCodec(max_depth={self.max_depth})"

    # -- public entry points --

    def encode(self, fragment: Fragment) -> bytes:
        return self._encode_metadata(fragment.metadata) + self._encode_data(fragment.data, 1)

    def decode(self, data: bytes) -> Fragment:
        r = Reader(data)
        fragment = self._read_fragment(r)
        r.finish()
        return fragment

    def encode_data(self, value: FragmentData) -> bytes:
        return self._encode_data(value, 1)

    def decode_data(self, data: bytes) -> FragmentData:
        r = Reader(data)
        value = self._read_data(r, 1)
        r.finish()
        return value

    # -- encoding --

    def _encode_data(self, value: FragmentData, depth: int) -> bytes:
        if depth > self.max_depth:
            raise DepthExceeded(self.max_depth)
        tag = scalar.encode_tag(FRAGMENT_DATA, type(value))
        if isinstance(value, EdnData):
            return tag + scalar.encode_bytes(value.text)
        if isinstance(value, AudioData):
            return tag + scalar.encode_audio_format(value.format) + scalar.encode_bytes(value.data)
        if isinstance(value, ImageData):
            return tag + scalar.encode_image_format(value.format) + scalar.encode_bytes(value.data)
        if isinstance(value, Sequence):
            return tag + encode_sequence(value.items, lambda item: self._encode_data(item, depth + 1))
        return tag + encode_table(value.entries(), lambda item: self._encode_data(item, depth + 1))

    def _encode_metadata(self, meta: FragmentMetadata) -> bytes:
        return (
            scalar.encode_bytes(meta.name)
            + scalar.encode_bytes(meta.description)
            + encode_table(meta.attributes.entries(), scalar.encode_bytes)
            + self._encode_preview(meta.preview)
        )

    def _encode_preview(self, preview: FragmentPreview) -> bytes:
        tag = scalar.encode_tag(FRAGMENT_PREVIEW, type(preview))
        if isinstance(preview, ImagePreview):
            return tag + scalar.encode_hash(preview.target)
        return tag

    # -- decoding --

    def _read_fragment(self, r: Reader) -> Fragment:
        metadata = self._read_metadata(r)
        return Fragment(metadata=metadata, data=self._read_data(r, 1))

    def _read_data(self, r: Reader, depth: int) -> FragmentData:
        if depth > self.max_depth:
            raise DepthExceeded(self.max_depth, r.pos)
        variant = scalar.decode_tag(r, FRAGMENT_DATA)
        if variant is EdnData:
            return EdnData(scalar.decode_bytes(r))
        if variant is AudioData:
            fmt = scalar.decode_audio_format(r)
            return AudioData(fmt, scalar.decode_bytes(r))
        if variant is ImageData:
            fmt = scalar.decode_image_format(r)
            return ImageData(fmt, scalar.decode_bytes(r))
        if variant is Sequence:
            return Sequence(tuple(decode_sequence(r, lambda rr: self._read_data(rr, depth + 1))))
        return Table._from_sorted(decode_table(r, lambda rr: self._read_data(rr, depth + 1)))

    def _read_metadata(self, r: Reader) -> FragmentMetadata:
        name = scalar.decode_bytes(r)
        description = scalar.decode_bytes(r)
        attributes = Attributes._from_sorted(decode_table(r, scalar.decode_bytes))
        return FragmentMetadata(name, description, attributes, self._read_preview(r))

    def _read_preview(self, r: Reader) -> FragmentPreview:
        variant = scalar.decode_tag(r, FRAGMENT_PREVIEW)
        if variant is ImagePreview:
            return ImagePreview(scalar.decode_hash(r))
        return NO_PREVIEW


DEFAULT_CODEC = FragmentCodec()


def encode(fragment: Fragment) -> bytes:
    return DEFAULT_CODEC.encode(fragment)


def decode(data: bytes) -> Fragment:
    """Decode exactly one Fragment; raises a DecodeError subclass on any defect."""
    return DEFAULT_CODEC.decode(data)


def encode_data(value: FragmentData) -> bytes:
    return DEFAULT_CODEC.encode_data(value)


def decode_data(data: bytes) -> FragmentData:
    return DEFAULT_CODEC.decode_data(data)
