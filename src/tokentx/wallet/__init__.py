"""
Wallet access for the token builder.

Available adapters:
- TapyrusCoreWalletAdapter: node-side wallets over Tapyrus Core JSON-RPC
"""

from tokentx.wallet.base import WalletAdapter
from tokentx.wallet.tapyrus_core import TapyrusCoreWalletAdapter
from tokentx.wallet.wallet import Wallet

__all__ = [
    "TapyrusCoreWalletAdapter",
    "Wallet",
    "WalletAdapter",
]
