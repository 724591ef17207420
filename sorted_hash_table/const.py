# ==================================================
# sorted_hash_table/const.py
# ==================================================
DEFAULT_SIZE  = 1024        # bucket count used when the caller gives none
NIL           = -1          # null arena slot (empty bucket / end of chain / spine end)
DJB2_SEED     = 5381
HASH_MASK     = (1 << 64) - 1   # djb2 wraps like an unsigned 64-bit long
DEFAULT_INDEX = "djb2"

# ── ordered-print tokens (bit-exact) ───────────────────────────
OPEN_BRACE  = b"{"
CLOSE_BRACE = b"}\n"
QUOTE       = b"'"
KV_SEP      = b": "
ENTRY_SEP   = b", "
