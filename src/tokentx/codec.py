"""
Serialization of Tapyrus transactions.

Layout (all integers little-endian):
    features(4) | varint n_in | inputs | varint n_out | outputs | lock_time(4)

Tapyrus computes the txid without scriptSigs (malleability fix), so a
transaction keeps its txid once signed. `compute_hash` covers the full
serialization.
"""

from __future__ import annotations

import hashlib
import struct

from tokentx.errors import TransactionCodecError
from tokentx.models import OutPoint, Transaction, TxIn, TxOut
from tokentx.script import Script


def hash256(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def varint(n: int) -> bytes:
    """Encode integer as varint."""
    if n < 0xFD:
        return bytes([n])
    elif n <= 0xFFFF:
        return bytes([0xFD]) + struct.pack("<H", n)
    elif n <= 0xFFFFFFFF:
        return bytes([0xFE]) + struct.pack("<I", n)
    else:
        return bytes([0xFF]) + struct.pack("<Q", n)


def read_varint(data: bytes, offset: int) -> tuple[int, int]:
    """Read varint and return (value, bytes_consumed)."""
    first = data[offset]
    if first < 0xFD:
        return first, 1
    elif first == 0xFD:
        return struct.unpack("<H", data[offset + 1 : offset + 3])[0], 3
    elif first == 0xFE:
        return struct.unpack("<I", data[offset + 1 : offset + 5])[0], 5
    else:
        return struct.unpack("<Q", data[offset + 1 : offset + 9])[0], 9


def serialize_input(inp: TxIn, include_script_sig: bool = True) -> bytes:
    result = inp.out_point.to_payload()
    script_sig = inp.script_sig if include_script_sig else b""
    result += varint(len(script_sig))
    result += script_sig
    result += struct.pack("<I", inp.sequence)
    return result


def serialize_output(out: TxOut) -> bytes:
    result = struct.pack("<Q", out.value)
    result += varint(len(out.script_pubkey.data))
    result += out.script_pubkey.data
    return result


def serialize_transaction(tx: Transaction, include_script_sig: bool = True) -> bytes:
    result = struct.pack("<I", tx.features)

    result += varint(len(tx.inputs))
    for inp in tx.inputs:
        result += serialize_input(inp, include_script_sig)

    result += varint(len(tx.outputs))
    for out in tx.outputs:
        result += serialize_output(out)

    result += struct.pack("<I", tx.lock_time)
    return result


def deserialize_transaction(tx_bytes: bytes) -> Transaction:
    try:
        offset = 0
        features = struct.unpack("<I", tx_bytes[offset : offset + 4])[0]
        offset += 4

        input_count, size = read_varint(tx_bytes, offset)
        offset += size

        inputs: list[TxIn] = []
        for _ in range(input_count):
            txid = tx_bytes[offset : offset + 32][::-1].hex()
            offset += 32
            vout = struct.unpack("<I", tx_bytes[offset : offset + 4])[0]
            offset += 4
            script_len, size = read_varint(tx_bytes, offset)
            offset += size
            script_sig = tx_bytes[offset : offset + script_len]
            offset += script_len
            sequence = struct.unpack("<I", tx_bytes[offset : offset + 4])[0]
            offset += 4
            inputs.append(TxIn(OutPoint(txid, vout), script_sig, sequence))

        output_count, size = read_varint(tx_bytes, offset)
        offset += size

        outputs: list[TxOut] = []
        for _ in range(output_count):
            value = struct.unpack("<Q", tx_bytes[offset : offset + 8])[0]
            offset += 8
            script_len, size = read_varint(tx_bytes, offset)
            offset += size
            script_pubkey = tx_bytes[offset : offset + script_len]
            offset += script_len
            outputs.append(TxOut(value, Script(script_pubkey)))

        lock_time = struct.unpack("<I", tx_bytes[offset : offset + 4])[0]
        offset += 4

    except (IndexError, struct.error) as e:
        raise TransactionCodecError(f"Failed to parse transaction: {e}") from e

    if offset != len(tx_bytes):
        raise TransactionCodecError(
            f"Trailing data after transaction: {len(tx_bytes) - offset} bytes"
        )

    return Transaction(inputs=inputs, outputs=outputs, features=features, lock_time=lock_time)


def compute_txid(tx: Transaction) -> str:
    """Double SHA256 of the transaction without scriptSigs, RPC byte order."""
    return hash256(serialize_transaction(tx, include_script_sig=False))[::-1].hex()


def compute_hash(tx: Transaction) -> str:
    """Double SHA256 of the full serialization, RPC byte order."""
    return hash256(serialize_transaction(tx))[::-1].hex()
