"""Default content addressing: sha256 over the canonical encoding."""
from __future__ import annotations

import hashlib

from .composer import encode, encode_data
from .model import Fragment, FragmentData, FragmentHash


def digest(canonical_bytes: bytes) -> FragmentHash:
    return FragmentHash(hashlib.sha256(canonical_bytes).digest())


def fragment_hash(fragment: Fragment) -> FragmentHash:
    """Compute the address a store would file this fragment under."""
    return digest(encode(fragment))


def data_hash(data: FragmentData) -> FragmentHash:
    return digest(encode_data(data))
