"""
UTXO selection.

First-fit greedy over the pool in the order given: accept each output that
passes the color filter until the running sum reaches the target. The
callers decide the ordering; nothing here sorts, shuffles or optimises.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import cast

from loguru import logger

from tokentx.color import ColorIdentifier
from tokentx.errors import InsufficientFunds, InsufficientTokens
from tokentx.models import UnspentOutput
from tokentx.script import ScriptType, classify

COLORED_SCRIPT_TYPES = (ScriptType.CP2PKH, ScriptType.CP2SH)


class FilterKind(str, Enum):
    PLAIN = "plain"
    COLORED = "colored"


@dataclass(frozen=True)
class ColorFilter:
    """Either every uncolored output, or the outputs of one color."""

    kind: FilterKind
    color_id: ColorIdentifier | None = None

    @classmethod
    def plain(cls) -> ColorFilter:
        return cls(FilterKind.PLAIN)

    @classmethod
    def colored(cls, color_id: ColorIdentifier) -> ColorFilter:
        return cls(FilterKind.COLORED, color_id)

    def __post_init__(self) -> None:
        if self.kind == FilterKind.COLORED and self.color_id is None:
            raise ValueError("Colored filter requires a color identifier")
        if self.kind == FilterKind.PLAIN and self.color_id is not None:
            raise ValueError("Plain filter must not carry a color identifier")

    def matches(self, output: UnspentOutput) -> bool:
        script = output.script
        script_type = classify(script.data)

        if self.kind == FilterKind.PLAIN:
            return script_type not in COLORED_SCRIPT_TYPES
        if self.kind == FilterKind.COLORED:
            return script_type in COLORED_SCRIPT_TYPES and script.color_id == self.color_id

        raise ValueError(f"Unknown filter kind: {self.kind}")


def select(
    pool: Iterable[UnspentOutput],
    color_filter: ColorFilter,
    target: int,
) -> tuple[int, list[UnspentOutput]]:
    """
    Pick outputs from pool until their sum reaches target.

    Args:
        pool: Candidate outputs, in the order they should be considered
        color_filter: Which outputs qualify
        target: Minimum sum to reach

    Returns:
        (achieved_sum, chosen_outputs)

    Raises:
        InsufficientFunds: plain pool exhausted before reaching target
        InsufficientTokens: colored pool exhausted before reaching a positive target

    A colored selection with target 0 never fails: it returns every output of
    that color. This is how "burn everything" and balance queries sweep.
    """
    if target < 0:
        raise ValueError(f"Selection target must be non-negative, got {target}")

    colored = color_filter.kind == FilterKind.COLORED
    total = 0
    chosen: list[UnspentOutput] = []

    for output in pool:
        if not color_filter.matches(output):
            continue

        total += output.amount
        chosen.append(output)

        if total >= target and (not colored or target > 0):
            logger.debug(
                f"Selected {len(chosen)} {color_filter.kind.value} output(s) "
                f"totalling {total} for target {target}"
            )
            return total, chosen

    if not colored:
        raise InsufficientFunds(target, total)
    if target > 0:
        color_id = cast(ColorIdentifier, color_filter.color_id)
        raise InsufficientTokens(color_id, target, total)

    logger.debug(f"Swept {len(chosen)} output(s) of color, total {total}")
    return total, chosen


def collect_uncolored_outputs(
    pool: Iterable[UnspentOutput], amount: int
) -> tuple[int, list[UnspentOutput]]:
    return select(pool, ColorFilter.plain(), amount)


def collect_colored_outputs(
    pool: Iterable[UnspentOutput], color_id: ColorIdentifier, amount: int = 0
) -> tuple[int, list[UnspentOutput]]:
    return select(pool, ColorFilter.colored(color_id), amount)
