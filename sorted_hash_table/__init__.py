from .hashing import (KEY_INDEXES, blake2b_index, djb2_index, get_key_index,
                      xxh64_index)
from .table import Entry, InvariantError, SortedHashTable, TableState

__all__ = [
    "SortedHashTable",
    "Entry",
    "TableState",
    "InvariantError",
    "KEY_INDEXES",
    "get_key_index",
    "djb2_index",
    "xxh64_index",
    "blake2b_index",
]
