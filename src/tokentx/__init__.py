"""
tokentx - Colored token transaction builder for Tapyrus

Selects unspent outputs and assembles funding, issuance, reissuance,
transfer and burn transactions for a wallet.
"""

__version__ = "0.1.0"

from tokentx.builder import (
    TokenTxBuilder,
    append_change,
    append_inputs,
    colored_balance,
)
from tokentx.color import ColorIdentifier, ColorType
from tokentx.constants import DUST_BUFFER, NFT_SUPPLY
from tokentx.errors import (
    InsufficientFunds,
    InsufficientTokens,
    TokenTxError,
    WalletError,
)
from tokentx.fee import FeeProvider, FixedFeeProvider, SizeBasedFeeProvider
from tokentx.models import OutPoint, PrevOutput, Transaction, TxIn, TxOut, UnspentOutput
from tokentx.script import Script, ScriptType
from tokentx.selector import ColorFilter, select
from tokentx.wallet import TapyrusCoreWalletAdapter, Wallet, WalletAdapter

__all__ = [
    "ColorFilter",
    "ColorIdentifier",
    "ColorType",
    "DUST_BUFFER",
    "FeeProvider",
    "FixedFeeProvider",
    "InsufficientFunds",
    "InsufficientTokens",
    "NFT_SUPPLY",
    "OutPoint",
    "PrevOutput",
    "Script",
    "ScriptType",
    "SizeBasedFeeProvider",
    "TapyrusCoreWalletAdapter",
    "TokenTxBuilder",
    "TokenTxError",
    "Transaction",
    "TxIn",
    "TxOut",
    "UnspentOutput",
    "Wallet",
    "WalletAdapter",
    "WalletError",
    "append_change",
    "append_inputs",
    "colored_balance",
    "select",
]
