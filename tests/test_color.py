"""
Tests for color identifiers.
"""

from __future__ import annotations

import hashlib

import pytest
from conftest import make_address, make_txid

from tokentx.color import ColorIdentifier, ColorType
from tokentx.errors import InvalidColorIdentifier
from tokentx.models import OutPoint
from tokentx.script import Script


class TestDerivation:
    """Tests for the three color derivations."""

    def test_reissuable(self) -> None:
        script = Script.parse_from_addr(make_address("issuer"))
        color_id = ColorIdentifier.reissuable(script)

        assert color_id.type == ColorType.REISSUABLE
        assert color_id.to_payload()[0] == 0xC1
        assert color_id.payload == hashlib.sha256(script.data).digest()

    def test_reissuable_is_deterministic(self) -> None:
        script = Script.parse_from_addr(make_address("issuer"))
        assert ColorIdentifier.reissuable(script) == ColorIdentifier.reissuable(script)

    def test_non_reissuable(self) -> None:
        out_point = OutPoint(make_txid("funding"), 1)
        color_id = ColorIdentifier.non_reissuable(out_point)

        expected = hashlib.sha256(bytes.fromhex(out_point.txid)[::-1] + b"\x01\x00\x00\x00")
        assert color_id.type == ColorType.NON_REISSUABLE
        assert color_id.payload == expected.digest()

    def test_non_reissuable_depends_on_vout(self) -> None:
        txid = make_txid("funding")
        assert ColorIdentifier.non_reissuable(OutPoint(txid, 0)) != (
            ColorIdentifier.non_reissuable(OutPoint(txid, 1))
        )

    def test_nft_shares_payload_but_not_type(self) -> None:
        out_point = OutPoint(make_txid("funding"), 0)
        nft = ColorIdentifier.nft(out_point)
        non_reissuable = ColorIdentifier.non_reissuable(out_point)

        assert nft.type == ColorType.NFT
        assert nft.payload == non_reissuable.payload
        assert nft != non_reissuable


class TestParsing:
    """Tests for parsing and encoding color identifiers."""

    def test_hex_roundtrip(self) -> None:
        color_id = ColorIdentifier.nft(OutPoint(make_txid("x"), 0))
        parsed = ColorIdentifier.from_hex(color_id.hex())
        assert parsed == color_id
        assert hash(parsed) == hash(color_id)
        assert len(color_id.to_payload()) == 33

    def test_wrong_length(self) -> None:
        with pytest.raises(InvalidColorIdentifier):
            ColorIdentifier.parse_from_payload(b"\xc1" + b"\x00" * 31)

    def test_unknown_type(self) -> None:
        with pytest.raises(InvalidColorIdentifier, match="Unknown color type"):
            ColorIdentifier.parse_from_payload(b"\xc4" + b"\x00" * 32)

    def test_invalid_hex(self) -> None:
        with pytest.raises(InvalidColorIdentifier):
            ColorIdentifier.from_hex("zz")

    def test_payload_size_checked(self) -> None:
        with pytest.raises(InvalidColorIdentifier):
            ColorIdentifier(ColorType.REISSUABLE, b"\x00" * 10)

    def test_not_equal_to_bytes(self) -> None:
        color_id = ColorIdentifier.nft(OutPoint(make_txid("x"), 0))
        assert color_id != color_id.to_payload()
