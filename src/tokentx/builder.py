"""
Transaction builder for Tapyrus colored-coin operations.

Every operation follows the same order:
1. Ask the fee provider for the fee (against the empty transaction)
2. Select inputs from the wallet's unspent outputs
3. Append inputs, then the receiver output, then change outputs
4. Hand the unsigned transaction to the wallet for signing

Output order is fixed per operation:
- fund:      receiver, plain change
- issue:     colored receiver, plain change
- transfer:  colored receiver, colored change, plain change
- burn:      colored change, plain change
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from loguru import logger

from tokentx.color import ColorIdentifier
from tokentx.constants import DUST_BUFFER, NFT_SUPPLY
from tokentx.errors import TokenTxError
from tokentx.fee import FeeProvider, FixedFeeProvider
from tokentx.models import OutPoint, PrevOutput, Transaction, TxIn, TxOut, UnspentOutput
from tokentx.script import Script
from tokentx.selector import collect_colored_outputs, collect_uncolored_outputs
from tokentx.wallet import Wallet

if TYPE_CHECKING:
    from tokentx.config import Settings

# Funding transactions pay the issuer at this output index
FUNDING_OUTPUT_INDEX = 0


def append_inputs(tx: Transaction, outputs: Iterable[UnspentOutput]) -> Transaction:
    """Spend each selected output, in selection order."""
    for output in outputs:
        tx.inputs.append(TxIn(out_point=output.out_point))
    return tx


def append_change(
    tx: Transaction,
    wallet: Wallet,
    change: int,
    color_id: ColorIdentifier | None = None,
    network: str | None = None,
) -> Transaction:
    """Return change to the wallet. Zero or negative change adds nothing."""
    if change <= 0:
        return tx

    change_script = Script.parse_from_addr(wallet.change_address(), network)
    if color_id is not None:
        change_script = change_script.add_color(color_id)
    tx.outputs.append(TxOut(value=change, script_pubkey=change_script))
    return tx


def receive_address(wallet: Wallet) -> str:
    return wallet.receive_address()


def colored_balance(wallet: Wallet, color_id: ColorIdentifier, only_finalized: bool = True) -> int:
    """Total amount of color_id held by the wallet."""
    total, _ = collect_colored_outputs(wallet.list_unspent(only_finalized), color_id)
    return total


class TokenTxBuilder:
    """
    Builds funding, issuance, reissuance, transfer and burn transactions.

    The fee provider passed to an operation overrides the builder default.
    With a network set, every wallet address must belong to that network.
    """

    def __init__(self, fee_provider: FeeProvider | None = None, network: str | None = None):
        self.fee_provider = fee_provider or FixedFeeProvider()
        self.network = network

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenTxBuilder:
        return cls(FixedFeeProvider.from_settings(settings), settings.network)

    def _script(self, address: str) -> Script:
        return Script.parse_from_addr(address, self.network)

    def _change(
        self,
        tx: Transaction,
        wallet: Wallet,
        change: int,
        color_id: ColorIdentifier | None = None,
    ) -> Transaction:
        return append_change(tx, wallet, change, color_id, self.network)

    def _fee(self, tx: Transaction, fee_provider: FeeProvider | None) -> int:
        fee = (fee_provider or self.fee_provider).fee(tx)
        logger.debug(f"Fee: {fee}")
        return fee

    def _funding_input(self, tx: Transaction, funding_tx: Transaction) -> TxOut:
        """Spend output 0 of funding_tx as the sole input."""
        if len(funding_tx.outputs) <= FUNDING_OUTPUT_INDEX:
            raise TokenTxError(
                f"Funding transaction {funding_tx.txid} has no output {FUNDING_OUTPUT_INDEX}"
            )
        out_point = OutPoint(funding_tx.txid, FUNDING_OUTPUT_INDEX)
        tx.inputs.append(TxIn(out_point=out_point))
        return funding_tx.outputs[FUNDING_OUTPUT_INDEX]

    def _sign(
        self,
        tx: Transaction,
        wallet: Wallet,
        operation: str,
        prev_outputs: list[PrevOutput] | None = None,
    ) -> Transaction:
        logger.info(
            f"Built {operation} transaction: {len(tx.inputs)} input(s), "
            f"{len(tx.outputs)} output(s), {tx.output_total()} total output value"
        )
        return wallet.sign_tx(tx, prev_outputs)

    def create_funding_tx(
        self,
        wallet: Wallet,
        amount: int,
        script: Script | None = None,
        fee_provider: FeeProvider | None = None,
    ) -> Transaction:
        """
        Pay amount of plain value from wallet to script.

        Args:
            wallet: Payer, also receives change
            amount: Value to pay
            script: Receiver script; defaults to a new receive address of wallet
            fee_provider: Overrides the builder's fee provider

        Raises:
            InsufficientFunds: wallet cannot cover amount + fee
        """
        tx = Transaction()
        fee = self._fee(tx, fee_provider)

        utxos = wallet.list_unspent()
        total, outputs = collect_uncolored_outputs(utxos, fee + amount)
        append_inputs(tx, outputs)

        receiver_script = script if script is not None else self._script(wallet.receive_address())
        tx.outputs.append(TxOut(value=amount, script_pubkey=receiver_script))

        self._change(tx, wallet, total - fee - amount)
        return self._sign(tx, wallet, "funding")

    def create_issue_tx_for_reissuable_token(
        self,
        funding_tx: Transaction,
        issuer: Wallet,
        amount: int,
        fee_provider: FeeProvider | None = None,
    ) -> Transaction:
        """
        Issue a reissuable token funded by output 0 of funding_tx.

        The color is derived from the issuer's receive script, so the same
        issuer script always yields the same color.
        """
        tx = Transaction()
        fee = self._fee(tx, fee_provider)

        funding_output = self._funding_input(tx, funding_tx)

        receiver_script = self._script(issuer.receive_address())
        color_id = ColorIdentifier.reissuable(receiver_script)
        tx.outputs.append(TxOut(value=amount, script_pubkey=receiver_script.add_color(color_id)))

        self._change(tx, issuer, funding_output.value - fee)
        logger.info(f"Issuing {amount} of reissuable color {color_id.hex()}")
        return self._sign(tx, issuer, "issue", self._prev_outputs(funding_tx, funding_output))

    def create_issue_tx_for_non_reissuable_token(
        self,
        issuer: Wallet,
        amount: int,
        fee_provider: FeeProvider | None = None,
    ) -> Transaction:
        """Issue a token whose color is bound to the first spent out point."""
        return self._issue_from_out_point(
            issuer, amount, ColorIdentifier.non_reissuable, fee_provider, "non-reissuable"
        )

    def create_issue_tx_for_nft_token(
        self,
        issuer: Wallet,
        fee_provider: FeeProvider | None = None,
    ) -> Transaction:
        """Issue a single-unit NFT bound to the first spent out point."""
        return self._issue_from_out_point(
            issuer, NFT_SUPPLY, ColorIdentifier.nft, fee_provider, "nft"
        )

    def _issue_from_out_point(
        self,
        issuer: Wallet,
        amount: int,
        derive: Callable[[OutPoint], ColorIdentifier],
        fee_provider: FeeProvider | None,
        kind: str,
    ) -> Transaction:
        tx = Transaction()
        fee = self._fee(tx, fee_provider)

        utxos = issuer.list_unspent()
        total, outputs = collect_uncolored_outputs(utxos, fee)
        append_inputs(tx, outputs)

        color_id = derive(tx.inputs[0].out_point)

        receiver_script = self._script(issuer.receive_address())
        tx.outputs.append(TxOut(value=amount, script_pubkey=receiver_script.add_color(color_id)))

        self._change(tx, issuer, total - fee)
        logger.info(f"Issuing {amount} of {kind} color {color_id.hex()}")
        return self._sign(tx, issuer, "issue")

    def create_reissue_tx(
        self,
        funding_tx: Transaction,
        issuer: Wallet,
        amount: int,
        color_id: ColorIdentifier,
        fee_provider: FeeProvider | None = None,
    ) -> Transaction:
        """Mint more of an existing reissuable color, funded by output 0 of funding_tx."""
        tx = Transaction()
        fee = self._fee(tx, fee_provider)

        funding_output = self._funding_input(tx, funding_tx)

        receiver_script = self._script(issuer.receive_address())
        tx.outputs.append(TxOut(value=amount, script_pubkey=receiver_script.add_color(color_id)))

        self._change(tx, issuer, funding_output.value - fee)
        logger.info(f"Reissuing {amount} of color {color_id.hex()}")
        return self._sign(tx, issuer, "reissue", self._prev_outputs(funding_tx, funding_output))

    def create_transfer_tx(
        self,
        color_id: ColorIdentifier,
        sender: Wallet,
        receiver: Wallet,
        amount: int,
        fee_provider: FeeProvider | None = None,
    ) -> Transaction:
        """
        Move amount of color_id from sender to receiver.

        Raises:
            InsufficientFunds: sender cannot cover the fee
            InsufficientTokens: sender holds less than amount of color_id
        """
        tx = Transaction()
        fee = self._fee(tx, fee_provider)

        utxos = sender.list_unspent()
        sum_plain, plain_outputs = collect_uncolored_outputs(utxos, fee)
        append_inputs(tx, plain_outputs)

        sum_token, token_outputs = collect_colored_outputs(utxos, color_id, amount)
        append_inputs(tx, token_outputs)

        receiver_script = self._script(receiver.receive_address())
        tx.outputs.append(TxOut(value=amount, script_pubkey=receiver_script.add_color(color_id)))

        self._change(tx, sender, sum_token - amount, color_id)
        self._change(tx, sender, sum_plain - fee)
        return self._sign(tx, sender, "transfer")

    def create_burn_tx(
        self,
        color_id: ColorIdentifier,
        sender: Wallet,
        amount: int = 0,
        fee_provider: FeeProvider | None = None,
    ) -> Transaction:
        """
        Destroy amount of color_id held by sender; amount 0 burns all of it.

        No colored output is created for the burned amount.
        """
        tx = Transaction()
        fee = self._fee(tx, fee_provider)

        utxos = sender.list_unspent()
        sum_plain, plain_outputs = collect_uncolored_outputs(utxos, fee + DUST_BUFFER)
        append_inputs(tx, plain_outputs)

        sum_token, token_outputs = collect_colored_outputs(utxos, color_id, amount)
        append_inputs(tx, token_outputs)

        if amount > 0:
            self._change(tx, sender, sum_token - amount, color_id)

        self._change(tx, sender, sum_plain - fee)
        burned = amount if amount > 0 else sum_token
        logger.info(f"Burning {burned} of color {color_id.hex()}")
        return self._sign(tx, sender, "burn")

    @staticmethod
    def _prev_outputs(funding_tx: Transaction, funding_output: TxOut) -> list[PrevOutput]:
        return [
            PrevOutput(
                txid=funding_tx.txid,
                vout=FUNDING_OUTPUT_INDEX,
                script_pubkey=funding_output.script_pubkey.hex(),
                amount=funding_output.value,
            )
        ]
