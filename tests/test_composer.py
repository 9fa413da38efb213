from concurrent.futures import ThreadPoolExecutor

import pytest

from fragment_core import (
    AudioData,
    AudioFormats,
    DepthExceeded,
    EdnData,
    Fragment,
    FragmentCodec,
    FragmentHash,
    FragmentMetadata,
    ImageData,
    ImageFormats,
    ImagePreview,
    InsufficientBytes,
    InvalidTag,
    Sequence,
    Table,
    TrailingBytes,
    UnorderedOrDuplicateKey,
    decode,
    decode_data,
    encode,
    encode_data,
)
from fragment_core.protocol import HARD_MAX_DEPTH


def nested(depth: int) -> Sequence:
    v = Sequence([])
    for _ in range(depth - 1):
        v = Sequence([v])
    return v


def sample_fragment() -> Fragment:
    data = Table(
        {
            b"score": Sequence(
                [
                    EdnData(b"{:tempo 120}"),
                    AudioData(AudioFormats.Wav, bytes(range(70))),
                ]
            ),
            b"cover": ImageData(ImageFormats.Png, b"\x89PNG"),
            b"empty": Table({}),
        }
    )
    meta = FragmentMetadata(
        name=b"song",
        description=b"a short loop",
        attributes={b"license": b"cc0", b"author": b"anon"},
        preview=ImagePreview(FragmentHash(bytes(range(32)))),
    )
    return Fragment(meta, data)


def test_audio_concrete_bytes():
    data = AudioData(AudioFormats.Ogg, bytes(range(1, 11)))
    encoded = encode_data(data)
    assert encoded == bytes([1, 0, 40]) + bytes(range(1, 11))
    assert decode_data(encoded) == data


def test_fragment_layout():
    fragment = Fragment(FragmentMetadata(b"test", b"test"), EdnData(b"hello world"))
    encoded = encode(fragment)
    assert encoded == b"\x10test" + b"\x10test" + b"\x00" + b"\x00" + b"\x00\x2chello world"
    assert decode(encoded) == fragment


@pytest.mark.parametrize(
    "value",
    [
        EdnData(b"hello world"),
        EdnData(b""),
        AudioData(AudioFormats.Mp3, b"\xff" * 300),
        ImageData(ImageFormats.Jpeg, bytes(range(1, 11))),
        Sequence([]),
        Sequence([EdnData(b"a"), Sequence([EdnData(b"b")])]),
        Table({b"a": EdnData(b"hello world"), b"b": AudioData(AudioFormats.Ogg, b"\x01")}),
    ],
)
def test_data_round_trip(value):
    assert decode_data(encode_data(value)) == value


def test_fragment_round_trip():
    fragment = sample_fragment()
    assert decode(encode(fragment)) == fragment


def test_table_encoding_independent_of_construction_order():
    pairs = [(b"k%02d" % i, EdnData(b"v%d" % i)) for i in range(20)]
    assert encode_data(Table(pairs)) == encode_data(Table(list(reversed(pairs))))


def test_descending_keys_rejected():
    descending = bytes([4, 8, 4, ord("b"), 0, 0, 4, ord("a"), 0, 0])
    with pytest.raises(UnorderedOrDuplicateKey) as exc:
        decode_data(descending)
    assert exc.value.key == b"a"
    assert exc.value.previous == b"b"
    assert exc.value.offset == 6

    ascending = bytes([4, 8, 4, ord("a"), 0, 0, 4, ord("b"), 0, 0])
    assert decode_data(ascending) == Table({b"a": EdnData(b""), b"b": EdnData(b"")})


def test_duplicate_keys_rejected():
    duplicated = bytes([4, 8, 4, ord("a"), 0, 0, 4, ord("a"), 0, 0])
    with pytest.raises(UnorderedOrDuplicateKey):
        decode_data(duplicated)


def test_unordered_attributes_rejected():
    raw = bytearray(encode(Fragment(FragmentMetadata(b""), EdnData(b""))))
    # name, description, then a two-entry attribute table written out of order
    raw[2:3] = bytes([8, 4, ord("z"), 0, 4, ord("a"), 0])
    with pytest.raises(UnorderedOrDuplicateKey):
        decode(bytes(raw))


def test_tampered_tag():
    encoded = bytearray(encode_data(AudioData(AudioFormats.Ogg, b"\x01\x02")))
    for tag in (5, 0x80, 0xFF):
        encoded[0] = tag
        with pytest.raises(InvalidTag) as exc:
            decode_data(bytes(encoded))
        assert exc.value.offset == 0


def test_tampered_preview_tag():
    fragment = Fragment(FragmentMetadata(b"n"), EdnData(b""))
    encoded = bytearray(encode(fragment))
    encoded[4] = 2  # preview discriminant
    with pytest.raises(InvalidTag):
        decode(bytes(encoded))


def test_every_strict_prefix_is_insufficient():
    encoded = encode(sample_fragment())
    for cut in range(len(encoded)):
        with pytest.raises(InsufficientBytes):
            decode(encoded[:cut])


def test_trailing_bytes():
    encoded = encode_data(EdnData(b"x"))
    with pytest.raises(TrailingBytes) as exc:
        decode_data(encoded + b"\x00")
    assert exc.value.count == 1
    assert exc.value.offset == len(encoded)


def test_depth_limit_boundary():
    codec = FragmentCodec(max_depth=8)
    wide = FragmentCodec(max_depth=16)
    assert codec.decode_data(codec.encode_data(nested(8))) == nested(8)
    with pytest.raises(DepthExceeded) as exc:
        codec.decode_data(wide.encode_data(nested(9)))
    assert exc.value.limit == 8


def test_depth_checked_before_reading_more_input():
    codec = FragmentCodec(max_depth=3)
    # four nested one-element sequences followed by plenty of input
    raw = bytes([3, 4]) * 4 + bytes(1024)
    with pytest.raises(DepthExceeded) as exc:
        codec.decode_data(raw)
    assert exc.value.offset == 6


def test_depth_limit_applies_to_table_values():
    codec = FragmentCodec(max_depth=2)
    assert codec.decode_data(codec.encode_data(Table({b"a": EdnData(b"")})))
    with pytest.raises(DepthExceeded):
        codec.encode_data(Table({b"a": Sequence([EdnData(b"")])}))


def test_encode_refuses_over_deep_tree():
    with pytest.raises(DepthExceeded):
        FragmentCodec(max_depth=4).encode_data(nested(5))


def test_codec_depth_bounds():
    with pytest.raises(ValueError):
        FragmentCodec(max_depth=0)
    with pytest.raises(ValueError):
        FragmentCodec(max_depth=HARD_MAX_DEPTH + 1)
    deepest = FragmentCodec(max_depth=HARD_MAX_DEPTH)
    assert deepest.decode_data(deepest.encode_data(nested(HARD_MAX_DEPTH))) == nested(HARD_MAX_DEPTH)


def test_impossible_count_fails_fast():
    # sequence claiming 2**30 elements with three bytes behind it
    raw = bytes([3]) + b"\x03\x00\x00\x00\x40" + b"\x00\x00\x00"
    with pytest.raises(InsufficientBytes):
        decode_data(raw)


def test_impossible_table_count_fails_fast():
    # table claiming 2**30 entries with three bytes behind it
    raw = bytes([4]) + b"\x03\x00\x00\x00\x40" + b"\x00" * 3
    with pytest.raises(InsufficientBytes) as exc:
        decode_data(raw)
    assert exc.value.offset == 1
    assert exc.value.needed == 2 * 2**30


def test_impossible_attribute_count_fails_fast():
    # empty name and description, three attributes declared, five bytes left
    raw = b"\x00\x00" + b"\x0c" + b"\x04a\x04b\x00"
    with pytest.raises(InsufficientBytes) as exc:
        decode(raw)
    assert exc.value.offset == 2
    assert exc.value.needed == 6
    assert exc.value.available == 5


def test_decoder_rejects_non_bytes_input():
    with pytest.raises(TypeError):
        decode(5)
    with pytest.raises(TypeError):
        decode_data("abc")


def test_decoded_value_is_detached_from_input():
    buf = bytearray(encode_data(EdnData(b"abc")))
    value = decode_data(buf)
    buf[2] = ord("z")
    assert value == EdnData(b"abc")


def test_parallel_decoding():
    fragments = [
        Fragment(FragmentMetadata(b"f%d" % i), Sequence([EdnData(b"%d" % j) for j in range(i)]))
        for i in range(32)
    ]
    encoded = [encode(f) for f in fragments]
    with ThreadPoolExecutor(max_workers=8) as pool:
        decoded = list(pool.map(decode, encoded))
    assert decoded == fragments
