"""
Color identifiers for Tapyrus colored coins.

A color identifier is 33 bytes: a type byte followed by a sha256 payload.

- reissuable:     0xC1 || sha256(issuer script_pubkey)
- non-reissuable: 0xC2 || sha256(out point)
- nft:            0xC3 || sha256(out point)

Reissuable colors are bound to a script, so the holder of that script can
mint again. Non-reissuable and NFT colors are bound to an out point that is
spent by the issuing transaction, so they can never be derived again.
"""

from __future__ import annotations

import hashlib
from enum import IntEnum
from typing import TYPE_CHECKING

from tokentx.constants import (
    COLOR_ID_SIZE,
    COLOR_TYPE_NFT,
    COLOR_TYPE_NON_REISSUABLE,
    COLOR_TYPE_REISSUABLE,
)
from tokentx.errors import InvalidColorIdentifier

if TYPE_CHECKING:
    from tokentx.models import OutPoint
    from tokentx.script import Script


class ColorType(IntEnum):
    REISSUABLE = COLOR_TYPE_REISSUABLE
    NON_REISSUABLE = COLOR_TYPE_NON_REISSUABLE
    NFT = COLOR_TYPE_NFT


class ColorIdentifier:
    """Token class fingerprint. Equal iff the 33 bytes are equal."""

    __slots__ = ("type", "payload")

    def __init__(self, color_type: ColorType, payload: bytes):
        if len(payload) != COLOR_ID_SIZE - 1:
            raise InvalidColorIdentifier(
                f"Color payload must be {COLOR_ID_SIZE - 1} bytes, got {len(payload)}"
            )
        self.type = ColorType(color_type)
        self.payload = payload

    @classmethod
    def reissuable(cls, script_pubkey: Script) -> ColorIdentifier:
        return cls(ColorType.REISSUABLE, hashlib.sha256(script_pubkey.data).digest())

    @classmethod
    def non_reissuable(cls, out_point: OutPoint) -> ColorIdentifier:
        return cls(ColorType.NON_REISSUABLE, hashlib.sha256(out_point.to_payload()).digest())

    @classmethod
    def nft(cls, out_point: OutPoint) -> ColorIdentifier:
        return cls(ColorType.NFT, hashlib.sha256(out_point.to_payload()).digest())

    @classmethod
    def parse_from_payload(cls, data: bytes) -> ColorIdentifier:
        if len(data) != COLOR_ID_SIZE:
            raise InvalidColorIdentifier(
                f"Color identifier must be {COLOR_ID_SIZE} bytes, got {len(data)}"
            )
        try:
            color_type = ColorType(data[0])
        except ValueError as e:
            raise InvalidColorIdentifier(f"Unknown color type: 0x{data[0]:02x}") from e
        return cls(color_type, data[1:])

    @classmethod
    def from_hex(cls, value: str) -> ColorIdentifier:
        try:
            data = bytes.fromhex(value)
        except ValueError as e:
            raise InvalidColorIdentifier(f"Invalid color identifier hex: {value}") from e
        return cls.parse_from_payload(data)

    def to_payload(self) -> bytes:
        return bytes([self.type]) + self.payload

    def hex(self) -> str:
        return self.to_payload().hex()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColorIdentifier):
            return NotImplemented
        return self.to_payload() == other.to_payload()

    def __hash__(self) -> int:
        return hash(self.to_payload())

    def __repr__(self) -> str:
        return f"ColorIdentifier({self.type.name}, {self.hex()})"
