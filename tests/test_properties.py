"""
Property-based checks of the dual-index invariants.
"""
from hypothesis import given, settings, strategies as st

from sorted_hash_table import SortedHashTable

keys   = st.binary(min_size=1, max_size=12)
values = st.binary(max_size=12)
ops    = st.lists(st.tuples(keys, values), max_size=80)
sizes  = st.integers(min_value=1, max_value=16)


@settings(max_examples=200, deadline=None)
@given(size=sizes, pairs=ops, index=st.sampled_from(["djb2", "xxh64", "blake2b"]))
def test_matches_sorted_dict_model(size, pairs, index):
    table = SortedHashTable(size, key_index=index)
    model = {}
    for k, v in pairs:
        assert table.set(k, v)
        model[k] = v
    table.verify()
    assert list(table.items()) == sorted(model.items())
    assert list(table.items(reverse=True)) == sorted(model.items(), reverse=True)
    assert len(table) == len(model)
    for k, v in model.items():
        assert table.get(k) == v
    for j in range(size):
        slot = int(table.buckets[j])
        while slot != -1:
            entry = table.entries[slot]
            assert table.key_index(entry.key, size) == j
            slot = entry.chain_next


@settings(deadline=None)
@given(pairs=ops, bad=st.sampled_from([(b"", b"x"), (None, b"x"), (b"k", None)]))
def test_rejected_set_leaves_table_identical(pairs, bad):
    table = SortedHashTable(4)
    for k, v in pairs:
        table.set(k, v)
    before = (table.format(), table.buckets.tobytes(), len(table))
    assert not table.set(*bad)
    assert (table.format(), table.buckets.tobytes(), len(table)) == before


@settings(deadline=None)
@given(k=keys, v=values)
def test_round_trip(k, v):
    table = SortedHashTable(1024)
    table.set(k, v)
    table.set(k, v)
    assert table.get(k) == v
    assert len(table) == 1
