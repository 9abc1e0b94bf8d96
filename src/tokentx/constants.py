"""
Tapyrus protocol and token-builder constants.

Colored scripts follow the Tapyrus layout:
    PUSH33 <color_id> OP_COLOR <P2PKH or P2SH script>
"""

from __future__ import annotations

# Smallest units per TPC (RPC amounts are decimal TPC strings)
TAPYRUS_UNITS = 100_000_000

# Opcodes used by the script shape matcher
OP_DUP = 0x76
OP_HASH160 = 0xA9
OP_EQUAL = 0x87
OP_EQUALVERIFY = 0x88
OP_CHECKSIG = 0xAC
OP_COLOR = 0xBC

# Color identifier type bytes
COLOR_TYPE_REISSUABLE = 0xC1
COLOR_TYPE_NON_REISSUABLE = 0xC2
COLOR_TYPE_NFT = 0xC3

# 1 type byte + 32 byte sha256 payload
COLOR_ID_SIZE = 33

# Address version bytes (prod / dev networks)
P2PKH_VERSIONS = {"prod": 0x00, "dev": 0x6F}
P2SH_VERSIONS = {"prod": 0x05, "dev": 0xC4}

# Default fee charged by FixedFeeProvider
DEFAULT_FIXED_FEE = 10_000

# Extra plain value reserved when burning, so that an output holding
# exactly the fee is never picked as the only plain input.
DUST_BUFFER = 600

# Supply of a single NFT issuance
NFT_SUPPLY = 1

# Tapyrus transactions carry a "features" field where Bitcoin has version
TX_FEATURES = 1
DEFAULT_SEQUENCE = 0xFFFFFFFF
