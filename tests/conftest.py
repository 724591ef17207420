"""
Pytest fixtures for sorted_hash_table tests.

Provides:
- a fresh 1024-bucket table
- a table whose key index sends every key to bucket 0 (forced collisions)
- a helper rendering print/print_rev output into bytes
"""
import io

import pytest

from sorted_hash_table import SortedHashTable


def single_bucket(key: bytes, size: int) -> int:
    return 0


@pytest.fixture
def table():
    t = SortedHashTable(1024)
    yield t
    t.delete()


@pytest.fixture
def colliding_table():
    t = SortedHashTable(8, key_index=single_bucket)
    yield t
    t.delete()


@pytest.fixture
def render():
    """
    Returns a function capturing what print/print_rev writes.

    Usage:
        assert render(table.print) == b"{}\\n"
    """
    def _render(printer, *args) -> bytes:
        out = io.BytesIO()
        printer(*args, file=out)
        return out.getvalue()
    return _render
