"""
Wallet facade bound to a process-wide adapter.

    Wallet.set_wallet_adapter(TapyrusCoreWalletAdapter.from_settings(get_settings()))
    wallet = Wallet.create()
    wallet.balance()
    wallet.list_unspent()
"""

from __future__ import annotations

from typing import ClassVar

from loguru import logger

from tokentx.errors import ShouldInitializeWalletAdapter
from tokentx.models import PrevOutput, Transaction, UnspentOutput
from tokentx.wallet.base import WalletAdapter


class Wallet:
    _wallet_adapter: ClassVar[WalletAdapter | None] = None

    def __init__(self, wallet_id: str):
        self.id = wallet_id

    @classmethod
    def set_wallet_adapter(cls, adapter: WalletAdapter | None) -> None:
        cls._wallet_adapter = adapter

    @classmethod
    def wallet_adapter(cls) -> WalletAdapter:
        if cls._wallet_adapter is None:
            raise ShouldInitializeWalletAdapter()
        return cls._wallet_adapter

    @classmethod
    def create(cls) -> Wallet:
        wallet_id = cls.wallet_adapter().create_wallet()
        logger.info(f"Created wallet {wallet_id}")
        return cls(wallet_id)

    @classmethod
    def load(cls, wallet_id: str) -> Wallet:
        cls.wallet_adapter().load_wallet(wallet_id)
        logger.info(f"Loaded wallet {wallet_id}")
        return cls(wallet_id)

    @classmethod
    def wallets(cls) -> list[Wallet]:
        return [cls(wallet_id) for wallet_id in cls.wallet_adapter().wallets()]

    def balance(self, only_finalized: bool = True) -> int:
        return self.wallet_adapter().balance(self.id, only_finalized)

    def list_unspent(self, only_finalized: bool = True) -> list[UnspentOutput]:
        return self.wallet_adapter().list_unspent(self.id, only_finalized)

    def delete(self) -> None:
        self.wallet_adapter().delete_wallet(self.id)
        logger.info(f"Deleted wallet {self.id}")

    def sign_tx(self, tx: Transaction, prev_outputs: list[PrevOutput] | None = None) -> Transaction:
        return self.wallet_adapter().sign_tx(self.id, tx, prev_outputs)

    def receive_address(self) -> str:
        return self.wallet_adapter().receive_address(self.id)

    def change_address(self) -> str:
        return self.wallet_adapter().change_address(self.id)

    def create_pubkey(self) -> str:
        return self.wallet_adapter().pubkey(self.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Wallet):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Wallet({self.id!r})"
