"""
Exceptions raised by the token transaction builder and wallet layer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tokentx.color import ColorIdentifier


class TokenTxError(Exception):
    """Base class for transaction construction failures."""

    pass


class InsufficientFunds(TokenTxError):
    """Plain-value selection could not reach its target."""

    def __init__(self, target: int, available: int):
        self.target = target
        self.available = available
        super().__init__(f"Insufficient funds: need {target}, have {available}")


class InsufficientTokens(TokenTxError):
    """Colored selection could not reach a strictly positive target."""

    def __init__(self, color_id: ColorIdentifier, target: int, available: int):
        self.color_id = color_id
        self.target = target
        self.available = available
        super().__init__(
            f"Insufficient tokens of {color_id.hex()}: need {target}, have {available}"
        )


class InvalidColorIdentifier(TokenTxError):
    pass


class InvalidScript(TokenTxError):
    pass


class InvalidAddress(TokenTxError):
    pass


class TransactionCodecError(TokenTxError):
    """Raised when a serialized transaction cannot be parsed."""

    pass


class WalletError(Exception):
    """Base class for wallet backend failures."""

    pass


class ShouldInitializeWalletAdapter(WalletError):
    def __init__(self) -> None:
        super().__init__(
            "You should initialize wallet adapter using "
            "`Wallet.set_wallet_adapter(some_wallet_adapter)`."
        )


class WalletUnloaded(WalletError):
    def __init__(self, wallet_id: str):
        self.wallet_id = wallet_id
        super().__init__(f"The wallet {wallet_id} is unloaded. You should load before use it.")


class WalletAlreadyLoaded(WalletError):
    def __init__(self, wallet_id: str):
        self.wallet_id = wallet_id
        super().__init__(f"The wallet {wallet_id} is already loaded.")


class WalletAlreadyCreated(WalletError):
    def __init__(self, wallet_id: str):
        self.wallet_id = wallet_id
        super().__init__(f"The wallet {wallet_id} is already created.")


class WalletNotFound(WalletError):
    def __init__(self, wallet_id: str):
        self.wallet_id = wallet_id
        super().__init__(f"Wallet {wallet_id} not found.")


class RPCError(WalletError):
    """Error object returned by the node's JSON-RPC interface."""

    def __init__(self, code: int | str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"RPC error {code}: {message}")
