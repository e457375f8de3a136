"""Typed order proposals produced by automated decision makers.

Each variant carries exactly the fields its order type requires and checks
them on construction, so nothing downstream branches on untyped payloads.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar, Union

from fundledger.core.exceptions import ValidationError
from fundledger.domain.models.enums import TransactionType


def _require_code(fund_code: str) -> None:
    if not fund_code or not fund_code.strip():
        raise ValidationError("Proposal requires a fund code")


@dataclass(frozen=True)
class BuyProposal:
    """Invest a cash amount into a fund."""

    action: ClassVar[TransactionType] = TransactionType.BUY

    fund_code: str
    amount: Decimal
    reason: str = ""

    def __post_init__(self) -> None:
        _require_code(self.fund_code)
        if self.amount is None or self.amount <= 0:
            raise ValidationError(f"buy proposal for {self.fund_code} requires amount > 0")


@dataclass(frozen=True)
class SellProposal:
    """Redeem shares of a fund."""

    action: ClassVar[TransactionType] = TransactionType.SELL

    fund_code: str
    shares: Decimal
    reason: str = ""

    def __post_init__(self) -> None:
        _require_code(self.fund_code)
        if self.shares is None or self.shares <= 0:
            raise ValidationError(f"sell proposal for {self.fund_code} requires shares > 0")


@dataclass(frozen=True)
class ConvertOutProposal:
    """Sell leg of a conversion; its proceeds fund a later ConvertInProposal."""

    action: ClassVar[TransactionType] = TransactionType.CONVERT_OUT

    fund_code: str
    shares: Decimal
    reason: str = ""

    def __post_init__(self) -> None:
        _require_code(self.fund_code)
        if self.shares is None or self.shares <= 0:
            raise ValidationError(f"convert_out proposal for {self.fund_code} requires shares > 0")


@dataclass(frozen=True)
class ConvertInProposal:
    """
    Buy leg of a conversion.

    related_index points at the ConvertOutProposal (same batch) whose settled
    proceeds become this leg's order amount.
    """

    action: ClassVar[TransactionType] = TransactionType.CONVERT_IN

    fund_code: str
    related_index: int
    reason: str = ""

    def __post_init__(self) -> None:
        _require_code(self.fund_code)
        if self.related_index is None or self.related_index < 0:
            raise ValidationError(f"convert_in proposal for {self.fund_code} requires related_index >= 0")


TradeProposal = Union[BuyProposal, SellProposal, ConvertOutProposal, ConvertInProposal]
