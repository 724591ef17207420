# sorted_hash_table/shash.py   – handle-style helpers around SortedHashTable
"""Functional API mirroring the table's lifecycle.

Every helper accepts ``None`` (an uninitialised handle) and reports
failure through its return value instead of raising.

``set`` and ``print`` shadow the builtins inside this module; use
``builtins.set`` / ``builtins.print`` if a helper here ever needs them.
"""
from __future__ import annotations

import logging
from typing import BinaryIO, Optional

from .const import DEFAULT_INDEX, DEFAULT_SIZE
from .hashing import KeyIndex
from .table import SortedHashTable

__all__ = ["create", "set", "get", "print", "print_rev", "delete"]

logger = logging.getLogger(__name__)


def create(size: int = DEFAULT_SIZE,
           key_index: KeyIndex | str = DEFAULT_INDEX) -> Optional[SortedHashTable]:
    """New empty table, or None when memory cannot be obtained.
    A non-positive ``size`` raises ValueError."""
    try:
        return SortedHashTable(size, key_index)
    except MemoryError:
        logger.warning("out of memory creating a table of %d buckets", size)
        return None


def set(table: Optional[SortedHashTable], key, value) -> bool:
    """Insert or update; True on success."""
    if table is None:
        return False
    return table.set(key, value)


def get(table: Optional[SortedHashTable], key) -> Optional[bytes]:
    if table is None:
        return None
    return table.get(key)


def print(table: Optional[SortedHashTable], file: Optional[BinaryIO] = None):
    if table is not None:
        table.print(file)


def print_rev(table: Optional[SortedHashTable], file: Optional[BinaryIO] = None):
    if table is not None:
        table.print_rev(file)


def delete(table: Optional[SortedHashTable]):
    if table is not None:
        table.delete()
