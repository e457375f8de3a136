"""Budget guard for automated order proposals."""

import logging
from dataclasses import replace
from decimal import Decimal, ROUND_FLOOR
from typing import Optional, Sequence

from fundledger.config.settings import get_settings
from fundledger.core.decimals import ZERO
from fundledger.domain.models import (
    BuyProposal,
    ConvertInProposal,
    ConvertOutProposal,
    SellProposal,
    TradeProposal,
)

logger = logging.getLogger(__name__)

WHOLE_UNIT = Decimal("1")
SHARE_PRECISION = Decimal("0.0001")


def clamp_buy_proposals(
    proposals: Sequence[TradeProposal],
    ceiling: Decimal,
    min_headroom: Optional[Decimal] = None,
) -> list[TradeProposal]:
    """
    Clamp buy proposals so their running total never exceeds ceiling.

    Proposals are walked in order. A buy that would cross the ceiling is
    shrunk to the remaining headroom (floored to whole currency units) if
    that headroom exceeds min_headroom, otherwise dropped. Sell-side share
    counts are floored to 4 dp. Other proposals pass through.

    Dropping proposals shifts positions in the batch, so convert_in
    related_index values are rewritten to point at their convert_out in the
    returned list; a convert_in whose convert_out was dropped is dropped too.
    The input sequence is not modified.
    """
    if min_headroom is None:
        min_headroom = get_settings().budget_min_headroom

    accepted: list[TradeProposal] = []
    convert_out_positions: dict[int, int] = {}
    committed = ZERO

    for index, proposal in enumerate(proposals):
        if isinstance(proposal, BuyProposal):
            if committed + proposal.amount > ceiling:
                headroom = ceiling - committed
                if headroom <= min_headroom:
                    logger.warning(
                        "Dropping buy of %s for %s: headroom %s below minimum %s",
                        proposal.amount,
                        proposal.fund_code,
                        headroom,
                        min_headroom,
                    )
                    continue
                clamped = headroom.to_integral_value(rounding=ROUND_FLOOR)
                logger.warning(
                    "Clamping buy for %s from %s to %s (ceiling %s)",
                    proposal.fund_code,
                    proposal.amount,
                    clamped,
                    ceiling,
                )
                proposal = replace(
                    proposal,
                    amount=clamped,
                    reason=_annotate(proposal.reason, f"clamped from {proposal.amount} to {clamped} by budget"),
                )
            committed += proposal.amount

        elif isinstance(proposal, (SellProposal, ConvertOutProposal)):
            shares = proposal.shares.quantize(SHARE_PRECISION, rounding=ROUND_FLOOR)
            if shares <= ZERO:
                logger.warning(
                    "Dropping %s for %s: %s shares rounds down to zero",
                    proposal.action.value,
                    proposal.fund_code,
                    proposal.shares,
                )
                continue
            if shares != proposal.shares:
                proposal = replace(proposal, shares=shares)
            if isinstance(proposal, ConvertOutProposal):
                convert_out_positions[index] = len(accepted)

        elif isinstance(proposal, ConvertInProposal):
            target = convert_out_positions.get(proposal.related_index)
            if target is None:
                logger.warning(
                    "Dropping convert_in for %s: linked convert_out #%d not accepted",
                    proposal.fund_code,
                    proposal.related_index,
                )
                continue
            if target != proposal.related_index:
                proposal = replace(proposal, related_index=target)

        accepted.append(proposal)

    return accepted


def _annotate(reason: str, text: str) -> str:
    return f"{reason} ({text})" if reason else text
