from pathlib import Path
from warnings import warn

from fragment_core import FragmentCodec, FragmentHash, DecodeError
from fragment_core.ids import digest
from fragment_core.protocol import DEFAULT_MAX_DEPTH, FORMAT_VERSION
from .const import ERRORS

def _fail(errors: list, **extra) -> dict:
    return {"status":"FAIL","error_count":len(errors),"errors":errors,"format_version":FORMAT_VERSION,**extra}

def verify_fragment_bytes(
    raw: bytes,
    expected_hash: FragmentHash | None = None,
    data_only: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> dict:
    errors = []
    codec = FragmentCodec(max_depth=max_depth)

    try:
        if data_only:
            canonical = codec.encode_data(codec.decode_data(raw))
        else:
            canonical = codec.encode(codec.decode(raw))
    except DecodeError as e:
        errors.append(e.as_dict())
        return _fail(errors, fragment_hash=None)

    # The hash is always taken over the input bytes, never a normalized re-encode.
    computed = digest(bytes(raw))
    # Fail-safe only: the decoder already rejects every non-canonical form it
    # knows of, so a mismatch here means the codec itself has regressed.
    if canonical != bytes(raw):
        warn(f"Decodable input is not canonical ({len(raw)} bytes in, {len(canonical)} bytes canonical)")
        errors.append({"code":"E_NOT_CANONICAL","message":ERRORS["E_NOT_CANONICAL"]})
        return _fail(errors, fragment_hash=computed.hex())

    if expected_hash is not None and expected_hash != computed:
        errors.append({"code":"E_HASH_MISMATCH","message":ERRORS["E_HASH_MISMATCH"],"expected":expected_hash.hex(),"computed":computed.hex()})
        return _fail(errors, fragment_hash=computed.hex())

    return {"status":"PASS","error_count":0,"errors":[],"format_version":FORMAT_VERSION,"fragment_hash":computed.hex()}

def verify_fragment_file(path: Path, expected_hash: FragmentHash | None = None, data_only: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> dict:
    if not path.exists():
        errors = [{"code":"E_LAYOUT_MISSING","message":ERRORS["E_LAYOUT_MISSING"],"path":str(path)}]
        return _fail(errors, fragment_hash=None)
    return verify_fragment_bytes(path.read_bytes(), expected_hash, data_only, max_depth)
