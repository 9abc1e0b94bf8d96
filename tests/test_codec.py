"""
Tests for transaction serialization.
"""

from __future__ import annotations

import pytest
from conftest import make_txid

from tokentx.codec import (
    compute_hash,
    compute_txid,
    deserialize_transaction,
    hash256,
    read_varint,
    serialize_transaction,
    varint,
)
from tokentx.errors import TransactionCodecError
from tokentx.models import OutPoint, Transaction, TxIn, TxOut
from tokentx.script import Script

# Unsigned Tapyrus transaction: one input, an OP_RETURN output and a P2PKH output
SAMPLE_TX_HEX = (
    "01000000010c22d3f121927c8a241a93cfbb1d6afc451ec7d32e8d37d63eb78d69afc55505"
    "0000000000ffffffff020000000000000000226a204bf5122f344554c53bde2ebb8cd2b7e3"
    "d1600ad631c385a5d7cce23c7785459af0b9f505000000001976a9141989373d44a421a92d"
    "f00d0237ab85dadd1d229088ac00000000"
)


class TestVarint:
    """Tests for varint encoding."""

    def test_single_byte(self) -> None:
        assert varint(0) == bytes([0x00])
        assert varint(252) == bytes([0xFC])

    def test_two_bytes(self) -> None:
        assert varint(253) == bytes([0xFD, 0xFD, 0x00])
        assert read_varint(varint(0xFFFF), 0) == (0xFFFF, 3)

    def test_four_bytes(self) -> None:
        result = varint(65536)
        assert result[0] == 0xFE
        assert read_varint(result, 0) == (65536, 5)

    def test_eight_bytes(self) -> None:
        result = varint(4294967296)
        assert result[0] == 0xFF
        assert read_varint(result, 0) == (4294967296, 9)


class TestHash256:
    def test_empty_input(self) -> None:
        expected = bytes.fromhex("5df6e0e2761359d30a8275058e299fcc0381534545f55cf43e41983f5d4c9456")
        assert hash256(b"") == expected


class TestDeserialize:
    """Tests for parsing raw transactions."""

    def test_parse_sample(self) -> None:
        tx = deserialize_transaction(bytes.fromhex(SAMPLE_TX_HEX))

        assert tx.features == 1
        assert tx.lock_time == 0
        assert len(tx.inputs) == 1
        assert tx.inputs[0].out_point == OutPoint(
            "0555c5af698db73ed6378d2ed3c71e45fc6a1dbbcf931a248a7c9221f1d3220c", 0
        )
        assert tx.inputs[0].script_sig == b""
        assert tx.inputs[0].sequence == 0xFFFFFFFF

        assert [out.value for out in tx.outputs] == [0, 99_990_000]
        assert tx.outputs[1].script_pubkey.hex() == (
            "76a9141989373d44a421a92df00d0237ab85dadd1d229088ac"
        )

    def test_reserialize_sample(self) -> None:
        tx = Transaction.from_hex(SAMPLE_TX_HEX)
        assert tx.to_hex() == SAMPLE_TX_HEX

    def test_truncated(self) -> None:
        with pytest.raises(TransactionCodecError):
            deserialize_transaction(bytes.fromhex(SAMPLE_TX_HEX[:-10]))

    def test_trailing_data(self) -> None:
        with pytest.raises(TransactionCodecError, match="Trailing data"):
            deserialize_transaction(bytes.fromhex(SAMPLE_TX_HEX + "00"))


class TestTxid:
    """Tests for txid computation."""

    def _tx(self, script_sig: bytes = b"") -> Transaction:
        return Transaction(
            inputs=[TxIn(OutPoint(make_txid("prev"), 2), script_sig=script_sig)],
            outputs=[TxOut(1_000, Script.p2pkh(bytes(20)))],
        )

    def test_txid_ignores_script_sig(self) -> None:
        unsigned = self._tx()
        signed = self._tx(script_sig=b"\x47" + b"\x01" * 71)

        assert compute_txid(unsigned) == compute_txid(signed)
        assert compute_hash(unsigned) != compute_hash(signed)

    def test_txid_of_unsigned_equals_hash(self) -> None:
        tx = self._tx()
        assert tx.txid == compute_hash(tx)
        assert tx.txid == hash256(serialize_transaction(tx))[::-1].hex()

    def test_txid_depends_on_outputs(self) -> None:
        tx = self._tx()
        other = self._tx()
        other.outputs[0].value = 999
        assert tx.txid != other.txid
