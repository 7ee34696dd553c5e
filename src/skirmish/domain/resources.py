"""Resource payment that weakens an action instead of refusing it."""
from __future__ import annotations

from dataclasses import dataclass

MIN_EFFECTIVENESS = 0.25


@dataclass(slots=True, frozen=True)
class CostPayment:
    paid: int
    remaining: int
    multiplier: float

    @property
    def weakened(self) -> bool:
        return self.multiplier < 1


def pay_cost(current: int, cost: int, *, available: int | None = None) -> CostPayment:
    """
    Pay ``cost`` out of ``current``.

    Only ``available`` (defaults to ``current``) may be spent. A shortfall never
    fails the action: whatever is available is consumed and the action's
    effectiveness scales with the fraction paid, down to ``MIN_EFFECTIVENESS``.
    """
    current = max(0, current)
    spendable = current if available is None else max(0, min(current, available))
    if cost <= 0:
        return CostPayment(paid=0, remaining=current, multiplier=1.0)
    paid = min(cost, spendable)
    if spendable <= 0:
        multiplier = MIN_EFFECTIVENESS
    elif spendable < cost:
        multiplier = max(MIN_EFFECTIVENESS, spendable / cost)
    else:
        multiplier = 1.0
    return CostPayment(paid=paid, remaining=current - paid, multiplier=multiplier)


__all__ = ["CostPayment", "MIN_EFFECTIVENESS", "pay_cost"]
