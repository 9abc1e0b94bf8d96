"""
Tapyrus Core RPC wallet adapter.

Each wallet is a node-side wallet named "wallet-<id>". Wallet RPCs are sent
to the per-wallet endpoint <rpc_url>/wallet/<name>.
"""

from __future__ import annotations

import secrets
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import httpx
from loguru import logger

from tokentx.constants import TAPYRUS_UNITS
from tokentx.errors import (
    RPCError,
    WalletAlreadyCreated,
    WalletAlreadyLoaded,
    WalletNotFound,
    WalletUnloaded,
)
from tokentx.models import PrevOutput, Transaction, UnspentOutput
from tokentx.wallet.base import WalletAdapter

if TYPE_CHECKING:
    from tokentx.config import Settings

WALLET_PREFIX = "wallet-"

# Timeout for RPC calls (seconds)
DEFAULT_RPC_TIMEOUT = 30.0

# Upper bound on confirmations passed to listunspent
MAX_CONFIRMATIONS = 999_999

# Tapyrus Core RPC error codes
RPC_WALLET_ERROR = -4
RPC_WALLET_NOT_FOUND = -18
RPC_WALLET_ALREADY_LOADED = -35


def to_tapyrus(amount: Any) -> int:
    """Convert an RPC TPC amount (string or number) to tapyrus."""
    return int(Decimal(str(amount)) * TAPYRUS_UNITS)


class TapyrusCoreWalletAdapter(WalletAdapter):
    def __init__(
        self,
        rpc_url: str = "http://127.0.0.1:12381",
        rpc_user: str = "user",
        rpc_password: str = "pass",
        timeout: float = DEFAULT_RPC_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.rpc_url = rpc_url.rstrip("/")
        self.client = httpx.Client(
            timeout=timeout, auth=(rpc_user, rpc_password), transport=transport
        )
        self._request_id = 0

    @classmethod
    def from_settings(cls, settings: Settings) -> TapyrusCoreWalletAdapter:
        return cls(
            rpc_url=settings.rpc_url,
            rpc_user=settings.rpc_user,
            rpc_password=settings.rpc_password,
            timeout=settings.rpc_timeout,
        )

    def _rpc_call(
        self, method: str, params: list | None = None, wallet_id: str | None = None
    ) -> Any:
        """
        Make an RPC call to Tapyrus Core.

        Args:
            method: RPC method name
            params: Method parameters
            wallet_id: Route the call to this wallet's endpoint

        Returns:
            RPC result

        Raises:
            RPCError: On RPC errors
            httpx.HTTPError: On connection/timeout errors
        """
        self._request_id += 1
        payload = {
            "jsonrpc": "1.0",
            "id": self._request_id,
            "method": method,
            "params": params or [],
        }

        url = self.rpc_url
        if wallet_id is not None:
            url = f"{url}/wallet/{WALLET_PREFIX}{wallet_id}"

        try:
            response = self.client.post(url, json=payload)
        except httpx.TimeoutException as e:
            logger.error(f"RPC call timed out: {method} - {e}")
            raise
        except httpx.HTTPError as e:
            logger.error(f"RPC call failed: {method} - {e}")
            raise

        # The node answers RPC errors with an HTTP error status and a JSON body
        try:
            data = response.json()
        except ValueError:
            response.raise_for_status()
            raise

        if "error" in data and data["error"]:
            error_info = data["error"]
            error_code = error_info.get("code", "unknown")
            error_msg = error_info.get("message", str(error_info))
            raise RPCError(error_code, error_msg)

        response.raise_for_status()
        return data.get("result")

    def _wallet_call(self, wallet_id: str, method: str, params: list | None = None) -> Any:
        try:
            return self._rpc_call(method, params, wallet_id=wallet_id)
        except RPCError as e:
            if e.code == RPC_WALLET_NOT_FOUND:
                raise WalletUnloaded(wallet_id) from e
            raise

    def create_wallet(self) -> str:
        wallet_id = secrets.token_hex(32)
        try:
            self._rpc_call("createwallet", [f"{WALLET_PREFIX}{wallet_id}"])
        except RPCError as e:
            if e.code == RPC_WALLET_ERROR:
                raise WalletAlreadyCreated(wallet_id) from e
            raise
        return wallet_id

    def load_wallet(self, wallet_id: str) -> None:
        try:
            self._rpc_call("loadwallet", [f"{WALLET_PREFIX}{wallet_id}"])
        except RPCError as e:
            if e.code in (RPC_WALLET_ERROR, RPC_WALLET_ALREADY_LOADED):
                raise WalletAlreadyLoaded(wallet_id) from e
            if e.code == RPC_WALLET_NOT_FOUND:
                raise WalletNotFound(wallet_id) from e
            raise

    def delete_wallet(self, wallet_id: str) -> None:
        self._wallet_call(wallet_id, "unloadwallet")

    def wallets(self) -> list[str]:
        names = self._rpc_call("listwallets") or []
        return [name[len(WALLET_PREFIX) :] for name in names if name.startswith(WALLET_PREFIX)]

    def balance(self, wallet_id: str, only_finalized: bool = True) -> int:
        confirmed = to_tapyrus(self._wallet_call(wallet_id, "getbalance", ["*", 1]))
        if only_finalized:
            return confirmed

        unconfirmed = to_tapyrus(self._wallet_call(wallet_id, "getunconfirmedbalance"))
        return confirmed + unconfirmed

    def list_unspent(self, wallet_id: str, only_finalized: bool = True) -> list[UnspentOutput]:
        min_conf = 1 if only_finalized else 0
        result = self._wallet_call(wallet_id, "listunspent", [min_conf, MAX_CONFIRMATIONS])

        utxos = [
            UnspentOutput(
                txid=entry["txid"],
                vout=entry["vout"],
                script_pubkey=entry.get("scriptPubKey", ""),
                amount=to_tapyrus(entry["amount"]),
                finalized=entry.get("confirmations", 0) > 0,
            )
            for entry in result or []
        ]
        logger.debug(f"Wallet {wallet_id[:16]}... has {len(utxos)} unspent output(s)")
        return utxos

    def sign_tx(
        self,
        wallet_id: str,
        tx: Transaction,
        prev_outputs: list[PrevOutput] | None = None,
    ) -> Transaction:
        prevtxs = [prev.to_rpc() for prev in prev_outputs or []]
        result = self._wallet_call(
            wallet_id, "signrawtransactionwithwallet", [tx.to_hex(), prevtxs]
        )

        if not result.get("complete", True):
            logger.warning(
                f"Transaction {tx.txid} is not completely signed: {result.get('errors', [])}"
            )

        return Transaction.from_hex(result["hex"])

    def receive_address(self, wallet_id: str) -> str:
        return self._wallet_call(wallet_id, "getnewaddress", ["", "legacy"])

    def change_address(self, wallet_id: str) -> str:
        return self._wallet_call(wallet_id, "getrawchangeaddress", ["legacy"])

    def pubkey(self, wallet_id: str) -> str:
        address = self._wallet_call(wallet_id, "getnewaddress", ["", "legacy"])
        info = self._wallet_call(wallet_id, "getaddressinfo", [address])
        return info["pubkey"]

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> TapyrusCoreWalletAdapter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
