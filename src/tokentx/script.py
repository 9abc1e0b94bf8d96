"""
Locking scripts and their shape classification.

Only the shapes the token builder needs are recognised:
    P2PKH:   OP_DUP OP_HASH160 <20> OP_EQUALVERIFY OP_CHECKSIG
    P2SH:    OP_HASH160 <20> OP_EQUAL
    CP2PKH:  <33 color_id> OP_COLOR <P2PKH>
    CP2SH:   <33 color_id> OP_COLOR <P2SH>
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import base58

from tokentx.color import ColorIdentifier
from tokentx.constants import (
    COLOR_ID_SIZE,
    OP_CHECKSIG,
    OP_COLOR,
    OP_DUP,
    OP_EQUAL,
    OP_EQUALVERIFY,
    OP_HASH160,
    P2PKH_VERSIONS,
    P2SH_VERSIONS,
)
from tokentx.errors import InvalidAddress, InvalidColorIdentifier, InvalidScript

# Length of the "PUSH33 <color_id> OP_COLOR" prefix
COLOR_PREFIX_SIZE = 1 + COLOR_ID_SIZE + 1


class ScriptType(str, Enum):
    P2PKH = "p2pkh"
    P2SH = "p2sh"
    CP2PKH = "cp2pkh"
    CP2SH = "cp2sh"
    NONSTANDARD = "nonstandard"


def _is_p2pkh(data: bytes) -> bool:
    return (
        len(data) == 25
        and data[0] == OP_DUP
        and data[1] == OP_HASH160
        and data[2] == 0x14
        and data[23] == OP_EQUALVERIFY
        and data[24] == OP_CHECKSIG
    )


def _is_p2sh(data: bytes) -> bool:
    return len(data) == 23 and data[0] == OP_HASH160 and data[1] == 0x14 and data[22] == OP_EQUAL


def _has_color_prefix(data: bytes) -> bool:
    return (
        len(data) > COLOR_PREFIX_SIZE
        and data[0] == COLOR_ID_SIZE
        and data[COLOR_PREFIX_SIZE - 1] == OP_COLOR
    )


def classify(data: bytes) -> ScriptType:
    """Classify raw script bytes by shape."""
    if _is_p2pkh(data):
        return ScriptType.P2PKH
    if _is_p2sh(data):
        return ScriptType.P2SH
    if _has_color_prefix(data):
        # A malformed color id makes the whole script nonstandard
        try:
            ColorIdentifier.parse_from_payload(data[1 : 1 + COLOR_ID_SIZE])
        except InvalidColorIdentifier:
            return ScriptType.NONSTANDARD
        body = data[COLOR_PREFIX_SIZE:]
        if _is_p2pkh(body):
            return ScriptType.CP2PKH
        if _is_p2sh(body):
            return ScriptType.CP2SH
    return ScriptType.NONSTANDARD


@dataclass(frozen=True)
class Script:
    data: bytes

    @classmethod
    def from_hex(cls, value: str) -> Script:
        try:
            return cls(bytes.fromhex(value))
        except ValueError as e:
            raise InvalidScript(f"Invalid script hex: {value!r}") from e

    @classmethod
    def p2pkh(cls, pubkey_hash: bytes) -> Script:
        if len(pubkey_hash) != 20:
            raise InvalidScript(f"P2PKH hash must be 20 bytes, got {len(pubkey_hash)}")
        return cls(
            bytes([OP_DUP, OP_HASH160, 0x14]) + pubkey_hash + bytes([OP_EQUALVERIFY, OP_CHECKSIG])
        )

    @classmethod
    def p2sh(cls, script_hash: bytes) -> Script:
        if len(script_hash) != 20:
            raise InvalidScript(f"P2SH hash must be 20 bytes, got {len(script_hash)}")
        return cls(bytes([OP_HASH160, 0x14]) + script_hash + bytes([OP_EQUAL]))

    @classmethod
    def parse_from_addr(cls, address: str, network: str | None = None) -> Script:
        """
        Build the locking script for a base58check Tapyrus address.

        When network is given, addresses of the other network are rejected.
        """
        try:
            decoded = base58.b58decode_check(address)
        except ValueError as e:
            raise InvalidAddress(f"Invalid address: {address}") from e

        if len(decoded) != 21:
            raise InvalidAddress(f"Invalid address length: {address}")

        version = decoded[0]
        payload = decoded[1:]
        if version not in (*P2PKH_VERSIONS.values(), *P2SH_VERSIONS.values()):
            raise InvalidAddress(f"Unknown address version: {version}")
        if network is not None and version not in (
            P2PKH_VERSIONS[network],
            P2SH_VERSIONS[network],
        ):
            raise InvalidAddress(f"Address {address} does not belong to the {network} network")

        if version in P2PKH_VERSIONS.values():
            return cls.p2pkh(payload)
        return cls.p2sh(payload)

    def to_addr(self, network: str = "prod") -> str:
        """Address of an uncolored script (colored scripts use their body)."""
        body = self.remove_color()
        script_type = body.type
        if script_type == ScriptType.P2PKH:
            version = P2PKH_VERSIONS[network]
            payload = body.data[3:23]
        elif script_type == ScriptType.P2SH:
            version = P2SH_VERSIONS[network]
            payload = body.data[2:22]
        else:
            raise InvalidScript(f"Script has no address form: {self.hex()}")
        return base58.b58encode_check(bytes([version]) + payload).decode()

    @property
    def type(self) -> ScriptType:
        return classify(self.data)

    def is_colored(self) -> bool:
        return self.type in (ScriptType.CP2PKH, ScriptType.CP2SH)

    @property
    def color_id(self) -> ColorIdentifier | None:
        if not self.is_colored():
            return None
        return ColorIdentifier.parse_from_payload(self.data[1 : 1 + COLOR_ID_SIZE])

    def add_color(self, color_id: ColorIdentifier) -> Script:
        """Return this P2PKH/P2SH script tagged with color_id."""
        if self.type not in (ScriptType.P2PKH, ScriptType.P2SH):
            raise InvalidScript(f"Only P2PKH or P2SH scripts can be colored: {self.hex()}")
        prefix = bytes([COLOR_ID_SIZE]) + color_id.to_payload() + bytes([OP_COLOR])
        return Script(prefix + self.data)

    def remove_color(self) -> Script:
        if not self.is_colored():
            return self
        return Script(self.data[COLOR_PREFIX_SIZE:])

    def hex(self) -> str:
        return self.data.hex()

    def __len__(self) -> int:
        return len(self.data)
