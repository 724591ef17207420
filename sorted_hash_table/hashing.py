# ==================================================
# sorted_hash_table/hashing.py
# ==================================================
"""Key-index functions: ``key_index(key, size) -> int in [0, size)``."""
from hashlib import blake2b
from typing import Callable
import struct

import xxhash

from .const import DJB2_SEED, HASH_MASK

KeyIndex = Callable[[bytes, int], int]


# -- raw hashes --------------------------------------------------------
def hash_djb2(key: bytes) -> int:
    h = DJB2_SEED
    for c in key:
        h = ((h << 5) + h + c) & HASH_MASK      # h * 33 + c
    return h


def hash_xxh64(key: bytes) -> int:
    return xxhash.xxh64_intdigest(key)


def hash_blake2b(key: bytes) -> int:
    return struct.unpack("<Q", blake2b(key, digest_size=8).digest())[0]


# -- bucket indexes ----------------------------------------------------
def djb2_index(key: bytes, size: int) -> int:
    return hash_djb2(key) % size


def xxh64_index(key: bytes, size: int) -> int:
    return hash_xxh64(key) % size


def blake2b_index(key: bytes, size: int) -> int:
    return hash_blake2b(key) % size


KEY_INDEXES: dict[str, KeyIndex] = {
    "djb2"   : djb2_index,
    "xxh64"  : xxh64_index,
    "blake2b": blake2b_index,
}


def get_key_index(name: str) -> KeyIndex:
    """Resolve a registered key-index function by name."""
    try:
        return KEY_INDEXES[name]
    except KeyError:
        raise ValueError(f"Unknown key index {name!r}; "
                         f"expected one of {sorted(KEY_INDEXES)}") from None
