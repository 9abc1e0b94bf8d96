"""
Test configuration for tokentx tests.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterator

import base58
import pytest

from tokentx.color import ColorIdentifier
from tokentx.models import PrevOutput, Transaction, UnspentOutput
from tokentx.script import Script
from tokentx.wallet import Wallet, WalletAdapter


def make_address(label: str, version: int = 0x6F) -> str:
    """Deterministic dev-network P2PKH address for a label."""
    pubkey_hash = hashlib.sha256(label.encode()).digest()[:20]
    return base58.b58encode_check(bytes([version]) + pubkey_hash).decode()


def make_txid(label: str) -> str:
    return hashlib.sha256(label.encode()).hexdigest()


class FakeWalletAdapter(WalletAdapter):
    """In-memory wallet backend. Addresses are reused, signing is a no-op."""

    def __init__(self) -> None:
        self.utxos: dict[str, list[UnspentOutput]] = {}
        self.signed: list[tuple[str, Transaction, list[PrevOutput] | None]] = []
        self.list_calls = 0
        self._counter = 0

    def create_wallet(self) -> str:
        self._counter += 1
        wallet_id = f"{self._counter:064x}"
        self.utxos[wallet_id] = []
        return wallet_id

    def load_wallet(self, wallet_id: str) -> None:
        self.utxos.setdefault(wallet_id, [])

    def delete_wallet(self, wallet_id: str) -> None:
        del self.utxos[wallet_id]

    def wallets(self) -> list[str]:
        return list(self.utxos)

    def balance(self, wallet_id: str, only_finalized: bool = True) -> int:
        return sum(
            u.amount
            for u in self.list_unspent(wallet_id, only_finalized)
            if not u.script.is_colored()
        )

    def list_unspent(self, wallet_id: str, only_finalized: bool = True) -> list[UnspentOutput]:
        self.list_calls += 1
        utxos = self.utxos[wallet_id]
        if only_finalized:
            return [u for u in utxos if u.finalized]
        return list(utxos)

    def sign_tx(
        self,
        wallet_id: str,
        tx: Transaction,
        prev_outputs: list[PrevOutput] | None = None,
    ) -> Transaction:
        self.signed.append((wallet_id, tx, prev_outputs))
        return tx

    def receive_address(self, wallet_id: str) -> str:
        return make_address(f"receive-{wallet_id}")

    def change_address(self, wallet_id: str) -> str:
        return make_address(f"change-{wallet_id}")

    def pubkey(self, wallet_id: str) -> str:
        return "02" + hashlib.sha256(wallet_id.encode()).hexdigest()

    def add_utxo(
        self,
        wallet_id: str,
        amount: int,
        color_id: ColorIdentifier | None = None,
        label: str | None = None,
        vout: int = 0,
        finalized: bool = True,
    ) -> UnspentOutput:
        script = Script.parse_from_addr(self.receive_address(wallet_id))
        if color_id is not None:
            script = script.add_color(color_id)
        label = label or f"{wallet_id}-{len(self.utxos[wallet_id])}"
        utxo = UnspentOutput(
            txid=make_txid(label),
            vout=vout,
            script_pubkey=script.hex(),
            amount=amount,
            finalized=finalized,
        )
        self.utxos[wallet_id].append(utxo)
        return utxo


@pytest.fixture
def adapter() -> Iterator[FakeWalletAdapter]:
    fake = FakeWalletAdapter()
    Wallet.set_wallet_adapter(fake)
    yield fake
    Wallet.set_wallet_adapter(None)


@pytest.fixture
def wallet(adapter: FakeWalletAdapter) -> Wallet:
    return Wallet.create()


@pytest.fixture
def other_wallet(adapter: FakeWalletAdapter) -> Wallet:
    return Wallet.create()


@pytest.fixture
def color_id() -> ColorIdentifier:
    return ColorIdentifier.reissuable(Script.parse_from_addr(make_address("token-issuer")))


@pytest.fixture
def plain_script() -> Script:
    return Script.parse_from_addr(make_address("plain"))
