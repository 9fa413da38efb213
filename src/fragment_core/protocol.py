"""Fragment wire protocol constants.

Single source of truth for discriminants, widths and codec limits.
Keep this file stable. Discriminants are append-only: a renumbered tag
invalidates every hash computed over the old encoding.
"""

FORMAT_VERSION = 1

# Fixed-width content address (sha256-sized digest)
FRAGMENT_HASH_LEN = 32

# FragmentData discriminants
TAG_EDN = 0
TAG_AUDIO = 1
TAG_IMAGE = 2
TAG_SEQUENCE = 3
TAG_TABLE = 4

# FragmentPreview discriminants
TAG_PREVIEW_NONE = 0
TAG_PREVIEW_IMAGE = 1

# Compact varint modes (low two bits of the first byte)
COMPACT_SINGLE = 0b00
COMPACT_TWO = 0b01
COMPACT_FOUR = 0b10
COMPACT_BIG = 0b11

COMPACT_SINGLE_MAX = (1 << 6) - 1
COMPACT_TWO_MAX = (1 << 14) - 1
COMPACT_FOUR_MAX = (1 << 30) - 1
COMPACT_BIG_MAX_BYTES = 67  # six-bit header: 63 + 4

# Default safety bounds
DEFAULT_MAX_DEPTH = 64
HARD_MAX_DEPTH = 128  # keeps recursive decode well inside the interpreter frame limit
MAX_LENGTH = (1 << 32) - 1  # u32 length and count prefixes

# Smallest possible encodings, used to reject impossible counts early
MIN_ELEMENT_LEN = 1  # one tag byte
MIN_ENTRY_LEN = 2  # empty key prefix + one tag byte
