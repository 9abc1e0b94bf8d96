"""
Transaction data models.

The in-progress transaction is a plain mutable dataclass owned by one builder
call; everything fetched from the wallet is frozen.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from tokentx.color import ColorIdentifier
from tokentx.constants import DEFAULT_SEQUENCE, TAPYRUS_UNITS, TX_FEATURES
from tokentx.script import Script


@dataclass(frozen=True)
class OutPoint:
    """Reference to a transaction output (txid in RPC byte order)."""

    txid: str
    vout: int

    def to_payload(self) -> bytes:
        # txid is big-endian hex, raw transactions store it reversed
        return bytes.fromhex(self.txid)[::-1] + struct.pack("<I", self.vout)

    def __str__(self) -> str:
        return f"{self.txid}:{self.vout}"


@dataclass(frozen=True)
class UnspentOutput:
    """A spendable output as reported by the wallet."""

    txid: str
    vout: int
    script_pubkey: str
    amount: int
    finalized: bool = True

    @property
    def out_point(self) -> OutPoint:
        return OutPoint(self.txid, self.vout)

    @property
    def script(self) -> Script:
        return Script.from_hex(self.script_pubkey)


@dataclass(frozen=True)
class PrevOutput:
    """Source output of an input the signing wallet does not track itself."""

    txid: str
    vout: int
    script_pubkey: str
    amount: int

    def to_rpc(self) -> dict[str, Any]:
        return {
            "txid": self.txid,
            "vout": self.vout,
            "scriptPubKey": self.script_pubkey,
            "amount": str(Decimal(self.amount) / TAPYRUS_UNITS),
        }


@dataclass
class TxIn:
    out_point: OutPoint
    script_sig: bytes = b""
    sequence: int = DEFAULT_SEQUENCE


@dataclass
class TxOut:
    value: int
    script_pubkey: Script

    @property
    def color_id(self) -> ColorIdentifier | None:
        return self.script_pubkey.color_id


@dataclass
class Transaction:
    """Ordered inputs and outputs of a Tapyrus transaction."""

    inputs: list[TxIn] = field(default_factory=list)
    outputs: list[TxOut] = field(default_factory=list)
    features: int = TX_FEATURES
    lock_time: int = 0

    @property
    def txid(self) -> str:
        from tokentx.codec import compute_txid

        return compute_txid(self)

    def to_hex(self) -> str:
        from tokentx.codec import serialize_transaction

        return serialize_transaction(self).hex()

    @classmethod
    def from_hex(cls, tx_hex: str) -> Transaction:
        from tokentx.codec import deserialize_transaction

        return deserialize_transaction(bytes.fromhex(tx_hex))

    def output_total(self) -> int:
        return sum(out.value for out in self.outputs)
