"""View models for settlement runs."""

from dataclasses import dataclass, field


@dataclass
class SettlementResult:
    """
    Aggregate outcome of one settlement run.

    processed counts confirmed transactions; failed counts terminal failures
    (insufficient position); skipped counts transactions left pending or
    isolated after an unexpected error, each with a reason.
    """

    processed: int = 0
    skipped: int = 0
    failed: int = 0
    skipped_reasons: list[str] = field(default_factory=list)

    def skip(self, reason: str) -> None:
        self.skipped += 1
        self.skipped_reasons.append(reason)
