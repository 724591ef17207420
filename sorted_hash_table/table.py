# ==================================================
# sorted_hash_table/table.py
# ==================================================
from __future__ import annotations

import enum
import logging
import sys
from typing import BinaryIO, Iterator, Optional

import numpy as np

from .const import (CLOSE_BRACE, DEFAULT_INDEX, DEFAULT_SIZE, ENTRY_SEP,
                    KV_SEP, NIL, OPEN_BRACE, QUOTE)
from .hashing import KeyIndex, get_key_index

logger = logging.getLogger(__name__)


class InvariantError(RuntimeError):
    """Raised by :meth:`SortedHashTable.verify` when the two indexes disagree."""


class TableState(enum.Enum):
    EMPTY     = "empty"
    POPULATED = "populated"
    DELETED   = "deleted"


_STRINGS = (str, bytes, bytearray, memoryview)


def _to_bytes(data) -> Optional[bytes]:
    # str is UTF-8 encoded; buffers are copied so the caller keeps ownership
    if isinstance(data, str):
        try:
            return data.encode("utf-8")
        except UnicodeEncodeError:          # lone surrogates
            return None
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    return None


class Entry:
    """One key -> value binding, threaded on a bucket chain and on the spine."""
    __slots__ = ("key", "value", "chain_next", "order_prev", "order_next")

    def __init__(self, key: bytes, value: bytes, chain_next: int = NIL):
        self.key        = key
        self.value      = value
        self.chain_next = chain_next
        self.order_prev = NIL
        self.order_next = NIL

    def __repr__(self) -> str:
        return f"Entry(key={self.key!r}, value={self.value!r})"


class SortedHashTable:
    """Fixed-size chained hash table whose entries are also kept on a
    doubly-linked list sorted by key (bytewise).

    Entries live in an append-only arena; buckets, chain links and spine
    links all hold arena slots, ``NIL`` marking the null link.
    """
    def __init__(self, size: int = DEFAULT_SIZE,
                 key_index: KeyIndex | str = DEFAULT_INDEX):
        if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
            raise ValueError(f"Bucket count must be an integer, got {size!r}")
        if size <= 0:
            raise ValueError("Bucket count must be positive")
        if isinstance(key_index, str):
            key_index = get_key_index(key_index)

        self.size       = int(size)
        self.key_index  = key_index
        self.buckets    = np.full(self.size, NIL, dtype=np.int64)
        self.entries: list[Entry] = []
        self.order_head = NIL
        self.order_tail = NIL
        self._deleted   = False
        logger.debug("created table with %d buckets", self.size)

    # ------------------------------------------------------------------
    @property
    def state(self) -> TableState:
        if self._deleted:
            return TableState.DELETED
        return TableState.POPULATED if self.entries else TableState.EMPTY

    @property
    def load_factor(self) -> float:
        return len(self.entries) / self.size

    def _bucket_of(self, key: bytes) -> Optional[int]:
        j = int(self.key_index(key, self.size))
        if not 0 <= j < self.size:
            logger.warning("key index %d out of range for %d buckets", j, self.size)
            return None
        return j

    def _find(self, key: bytes, j: int) -> int:
        slot = int(self.buckets[j])
        while slot != NIL:
            entry = self.entries[slot]
            if entry.key == key:
                return slot
            slot = entry.chain_next
        return NIL

    # ------------------------------------------------------------------
    def set(self, key, value) -> bool:
        """Insert ``key`` or replace its value. Returns False on rejected
        input or allocation failure, leaving the table untouched."""
        if self._deleted:
            logger.warning("set on a deleted table")
            return False
        try:
            k = _to_bytes(key)
            v = _to_bytes(value)
        except MemoryError:
            logger.warning("out of memory copying key/value")
            return False
        if not k or v is None:
            logger.debug("rejected set(%r, %r)", key, value)
            return False

        j = self._bucket_of(k)
        if j is None:
            return False

        slot = self._find(k, j)
        if slot != NIL:
            self.entries[slot].value = v
            return True

        slot = len(self.entries)
        try:
            self.entries.append(Entry(k, v, int(self.buckets[j])))
        except MemoryError:
            logger.warning("out of memory inserting %r", k)
            return False

        self.buckets[j] = slot
        self._splice(slot)
        return True

    def _splice(self, slot: int):
        entries = self.entries
        new     = entries[slot]

        if self.order_head == NIL:
            self.order_head = self.order_tail = slot
            return

        head = entries[self.order_head]
        if new.key < head.key:
            new.order_next  = self.order_head
            head.order_prev = slot
            self.order_head = slot
            return

        cur = self.order_head
        nxt = entries[cur].order_next
        while nxt != NIL and entries[nxt].key < new.key:
            cur, nxt = nxt, entries[nxt].order_next

        new.order_prev = cur
        new.order_next = nxt
        if nxt == NIL:
            self.order_tail = slot
        else:
            entries[nxt].order_prev = slot
        entries[cur].order_next = slot

    # ------------------------------------------------------------------
    def get(self, key) -> Optional[bytes]:
        if self._deleted:
            return None
        k = _to_bytes(key)
        if not k:
            return None
        j = self._bucket_of(k)
        if j is None:
            return None
        slot = self._find(k, j)
        return None if slot == NIL else self.entries[slot].value

    # ------------------------------------------------------------------
    def _walk(self, reverse: bool = False) -> Iterator[Entry]:
        entries = self.entries
        slot = self.order_tail if reverse else self.order_head
        while slot != NIL:
            entry = entries[slot]
            yield entry
            slot = entry.order_prev if reverse else entry.order_next

    def format(self, reverse: bool = False) -> bytes:
        """Render ``{'k': 'v', ...}\\n`` in spine order; no escaping."""
        body = ENTRY_SEP.join(QUOTE + e.key + QUOTE + KV_SEP + QUOTE + e.value + QUOTE
                              for e in self._walk(reverse))
        return OPEN_BRACE + body + CLOSE_BRACE

    def format_rev(self) -> bytes:
        return self.format(reverse=True)

    def print(self, file: Optional[BinaryIO] = None):
        self._emit(self.format(), file)

    def print_rev(self, file: Optional[BinaryIO] = None):
        self._emit(self.format_rev(), file)

    def _emit(self, data: bytes, file: Optional[BinaryIO]):
        if self._deleted:
            return
        if file is None:
            sys.stdout.flush()                  # keep ordering with text writes
            file = getattr(sys.stdout, "buffer", None)
            if file is None:                    # text-only stdout (redirect_stdout, notebooks)
                sys.stdout.write(data.decode("utf-8", "surrogateescape"))
                sys.stdout.flush()
                return
        file.write(data)
        file.flush()

    # ------------------------------------------------------------------
    def delete(self):
        """Release every entry and the bucket array; the handle is unusable
        afterwards. Deleting twice is a no-op."""
        if self._deleted:
            return
        released = 0
        slot = self.order_head
        while slot != NIL:
            entry = self.entries[slot]
            slot  = entry.order_next
            entry.key = entry.value = None
            entry.chain_next = entry.order_prev = entry.order_next = NIL
            released += 1
        self.entries.clear()
        self.buckets    = np.empty(0, dtype=np.int64)
        self.order_head = self.order_tail = NIL
        self._deleted   = True
        logger.debug("deleted table, released %d entries", released)

    # ── mapping protocol ──────────────────────────────────────────────
    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key) -> bool:
        return self.get(key) is not None

    def __getitem__(self, key) -> bytes:
        if not isinstance(key, _STRINGS):
            raise TypeError(f"Keys must be str or bytes, not {type(key).__name__}")
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __setitem__(self, key, value):
        if not isinstance(key, _STRINGS) or not isinstance(value, _STRINGS):
            raise TypeError("Keys and values must be str or bytes")
        if not self.set(key, value):
            raise ValueError(f"Cannot store key {key!r}")

    def __iter__(self) -> Iterator[bytes]:
        return (e.key for e in self._walk())

    def __reversed__(self) -> Iterator[bytes]:
        return (e.key for e in self._walk(reverse=True))

    def keys(self, reverse: bool = False) -> Iterator[bytes]:
        return (e.key for e in self._walk(reverse))

    def values(self, reverse: bool = False) -> Iterator[bytes]:
        return (e.value for e in self._walk(reverse))

    def items(self, reverse: bool = False) -> Iterator[tuple[bytes, bytes]]:
        return ((e.key, e.value) for e in self._walk(reverse))

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(size={self.size}, count={len(self)}, "
                f"state={self.state.value})")

    # ── bucket statistics ─────────────────────────────────────────────
    def chain_lengths(self) -> np.ndarray:
        owners = []
        for j in np.flatnonzero(self.buckets != NIL):
            slot = int(self.buckets[j])
            while slot != NIL:
                owners.append(j)
                slot = self.entries[slot].chain_next
        return np.bincount(np.asarray(owners, dtype=np.int64),
                           minlength=len(self.buckets))

    def stats(self) -> dict:
        lengths = self.chain_lengths()
        return {
            "size"         : self.size,
            "count"        : len(self),
            "load_factor"  : self.load_factor,
            "max_chain"    : int(lengths.max(initial=0)),
            "empty_buckets": int(np.count_nonzero(lengths == 0)),
            "collisions"   : int(np.clip(lengths - 1, 0, None).sum()),
        }

    # ── consistency check ─────────────────────────────────────────────
    def verify(self):
        """Walk both indexes and raise InvariantError if they disagree."""
        entries = self.entries
        count   = len(entries)

        # spine, forward
        forward, prev, slot = [], NIL, self.order_head
        while slot != NIL:
            if len(forward) >= count:
                raise InvariantError("spine is longer than the arena (cycle?)")
            entry = entries[slot]
            if entry.order_prev != prev:
                raise InvariantError(f"broken back-link at {entry.key!r}")
            if prev != NIL and not entries[prev].key < entry.key:
                raise InvariantError(f"spine not strictly ascending at {entry.key!r}")
            forward.append(slot)
            prev, slot = slot, entry.order_next
        if prev != self.order_tail:
            raise InvariantError("order_tail is not the last spine entry")

        # spine, reverse
        backward, slot = [], self.order_tail
        while slot != NIL:
            if len(backward) >= count:
                raise InvariantError("reverse spine is longer than the arena")
            backward.append(slot)
            slot = entries[slot].order_prev
        if backward != forward[::-1]:
            raise InvariantError("reverse walk does not mirror forward walk")

        # bucket chains
        chained = []
        for j in range(len(self.buckets)):
            slot = int(self.buckets[j])
            while slot != NIL:
                if len(chained) >= count:
                    raise InvariantError("chains hold more entries than the arena")
                entry = entries[slot]
                if self.key_index(entry.key, self.size) != j:
                    raise InvariantError(f"{entry.key!r} sits in the wrong bucket {j}")
                chained.append(slot)
                slot = entry.chain_next

        if sorted(chained) != sorted(forward) or len(forward) != count:
            raise InvariantError("spine and bucket chains hold different entries")
        if len({entries[s].key for s in forward}) != count:
            raise InvariantError("duplicate keys")
        empty = self.order_head == NIL
        if empty != (self.order_tail == NIL) or empty != (count == 0):
            raise InvariantError("spine endpoints disagree with table contents")
