"""
Base wallet adapter interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from tokentx.models import PrevOutput, Transaction, UnspentOutput


class WalletAdapter(ABC):
    """
    Abstract wallet backend.

    Implementations own key material, address derivation and UTXO tracking.
    The token builder only lists outputs, asks for addresses and requests
    signatures; it never sees keys.
    """

    @abstractmethod
    def create_wallet(self) -> str:
        """Create a new wallet, returns its id"""

    @abstractmethod
    def load_wallet(self, wallet_id: str) -> None:
        """Load an existing wallet"""

    @abstractmethod
    def delete_wallet(self, wallet_id: str) -> None:
        """Unload and forget a wallet"""

    @abstractmethod
    def wallets(self) -> list[str]:
        """Ids of all loaded wallets"""

    @abstractmethod
    def balance(self, wallet_id: str, only_finalized: bool = True) -> int:
        """Plain balance in tapyrus"""

    @abstractmethod
    def list_unspent(self, wallet_id: str, only_finalized: bool = True) -> list[UnspentOutput]:
        """Unspent outputs, in a stable order for the duration of one call"""

    @abstractmethod
    def sign_tx(
        self,
        wallet_id: str,
        tx: Transaction,
        prev_outputs: list[PrevOutput] | None = None,
    ) -> Transaction:
        """Sign every input the wallet can sign.

        prev_outputs describes inputs whose source transaction the wallet
        does not track (e.g. a funding output owned by someone else)."""

    @abstractmethod
    def receive_address(self, wallet_id: str) -> str:
        """Address for receiving"""

    @abstractmethod
    def change_address(self, wallet_id: str) -> str:
        """Address for change"""

    @abstractmethod
    def pubkey(self, wallet_id: str) -> str:
        """New compressed public key (hex)"""

    def close(self) -> None:
        """Close backend connection"""
        pass
