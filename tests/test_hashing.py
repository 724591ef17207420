"""
Tests for the key-index functions.
"""
import pytest

from sorted_hash_table import KEY_INDEXES, get_key_index
from sorted_hash_table.hashing import hash_djb2, hash_xxh64, djb2_index


class TestDjb2:
    def test_known_values(self):
        assert hash_djb2(b"") == 5381
        assert hash_djb2(b"a") == 5381 * 33 + 97
        assert hash_djb2(b"ab") == (5381 * 33 + 97) * 33 + 98

    def test_wraps_to_64_bits(self):
        h = hash_djb2(b"x" * 200)
        assert 0 <= h < 2 ** 64

    def test_index(self):
        assert djb2_index(b"a", 1024) == (5381 * 33 + 97) % 1024


class TestXxh64:
    def test_empty_digest(self):
        assert hash_xxh64(b"") == 0xEF46DB3751D8E999


class TestRegistry:
    @pytest.mark.parametrize("name", sorted(KEY_INDEXES))
    def test_bounded_and_deterministic(self, name):
        key_index = get_key_index(name)
        for size in (1, 7, 1024):
            for key in (b"a", b"betty", b"\x00\xff", b"z" * 64):
                j = key_index(key, size)
                assert 0 <= j < size
                assert key_index(key, size) == j

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown key index"):
            get_key_index("crc32")
