"""Fragment Core - canonical binary codec for content-addressed fragments."""
from .canonical import is_canonical, reencode
from .composer import DEFAULT_CODEC, FragmentCodec, decode, decode_data, encode, encode_data
from .errors import (
    ERRORS,
    DecodeError,
    DepthExceeded,
    InsufficientBytes,
    InvalidLength,
    InvalidTag,
    TrailingBytes,
    UnorderedOrDuplicateKey,
)
from .ids import data_hash, fragment_hash
from .model import (
    NO_PREVIEW,
    Attributes,
    AudioData,
    AudioFormats,
    EdnData,
    Fragment,
    FragmentData,
    FragmentHash,
    FragmentMetadata,
    FragmentPreview,
    ImageData,
    ImageFormats,
    ImagePreview,
    NoPreview,
    Sequence,
    Table,
    nesting_depth,
)

__all__ = [
    "ERRORS",
    "NO_PREVIEW",
    "DEFAULT_CODEC",
    "Attributes",
    "AudioData",
    "AudioFormats",
    "DecodeError",
    "DepthExceeded",
    "EdnData",
    "Fragment",
    "FragmentCodec",
    "FragmentData",
    "FragmentHash",
    "FragmentMetadata",
    "FragmentPreview",
    "ImageData",
    "ImageFormats",
    "ImagePreview",
    "InsufficientBytes",
    "InvalidLength",
    "InvalidTag",
    "NoPreview",
    "Sequence",
    "Table",
    "TrailingBytes",
    "UnorderedOrDuplicateKey",
    "data_hash",
    "decode",
    "decode_data",
    "encode",
    "encode_data",
    "fragment_hash",
    "is_canonical",
    "nesting_depth",
    "reencode",
]
