"""
Fee providers.

A fee provider is asked exactly once per builder operation, before any input
or output is added. Size-based providers therefore see an empty transaction
unless the caller sizes it up front (see `SizeBasedFeeProvider`).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from tokentx.codec import serialize_transaction
from tokentx.constants import DEFAULT_FIXED_FEE
from tokentx.models import Transaction

if TYPE_CHECKING:
    from tokentx.config import Settings

# Size estimates for P2PKH-style spends
INPUT_SIZE_ESTIMATE = 148
COLORED_OUTPUT_SIZE_ESTIMATE = 70


class FeeProvider(ABC):
    @abstractmethod
    def fee(self, tx: Transaction) -> int:
        """Fee in tapyrus for the given transaction."""


class FixedFeeProvider(FeeProvider):
    """Charges the same fee regardless of transaction shape."""

    def __init__(self, fixed_fee: int = DEFAULT_FIXED_FEE):
        if fixed_fee < 0:
            raise ValueError(f"Fee must be non-negative, got {fixed_fee}")
        self.fixed_fee = fixed_fee

    @classmethod
    def from_settings(cls, settings: Settings) -> FixedFeeProvider:
        return cls(settings.fixed_fee)

    def fee(self, tx: Transaction) -> int:
        return self.fixed_fee


class SizeBasedFeeProvider(FeeProvider):
    """
    Charges fee_rate per byte of the serialized transaction, plus estimates
    for inputs and outputs not yet added.

    Builder operations compute the fee before assembling the transaction, so
    `expected_inputs` / `expected_outputs` let the caller describe the final
    shape. The result is an approximation, never lower than `min_fee`.
    """

    def __init__(
        self,
        fee_rate: int,
        min_fee: int = 0,
        expected_inputs: int = 0,
        expected_outputs: int = 0,
    ):
        if fee_rate < 0 or min_fee < 0:
            raise ValueError("Fee rate and minimum fee must be non-negative")
        self.fee_rate = fee_rate
        self.min_fee = min_fee
        self.expected_inputs = expected_inputs
        self.expected_outputs = expected_outputs

    def estimate_size(self, tx: Transaction) -> int:
        size = len(serialize_transaction(tx))
        size += max(self.expected_inputs - len(tx.inputs), 0) * INPUT_SIZE_ESTIMATE
        size += max(self.expected_outputs - len(tx.outputs), 0) * COLORED_OUTPUT_SIZE_ESTIMATE
        return size

    def fee(self, tx: Transaction) -> int:
        return max(self.min_fee, self.estimate_size(tx) * self.fee_rate)
