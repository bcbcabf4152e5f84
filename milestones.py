from __future__ import annotations

"""Percent-paid checkpoints for a completed payoff strategy."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, List

from payoff import PayoffStrategy

THRESHOLDS = (Decimal("0.25"), Decimal("0.50"), Decimal("0.75"), Decimal("1.00"))


@dataclass
class Milestone:
    title: str
    description: str
    target_date: date
    amount_paid: Decimal
    remaining_debt: Decimal

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "target_date": self.target_date.isoformat(),
            "amount_paid": str(self.amount_paid),
            "remaining_debt": str(self.remaining_debt),
        }


def _describe(threshold: Decimal) -> tuple[str, str]:
    percent = int(threshold * 100)
    title = f"{percent}% Debt Free!"
    if threshold == 1:
        return title, "Completely debt free! You did it!"
    return title, f"{percent}% of your debt has been eliminated!"


def generate_milestones(strategy: PayoffStrategy) -> List[Milestone]:
    """Return the 25/50/75/100% payoff checkpoints reached by ``strategy``.

    Progress is measured against ``strategy.starting_balance``. After each
    schedule row the total remaining debt is the latest remaining balance of
    every debt, with debts that have no row yet counted at their starting
    balance. Thresholds that are never reached produce no milestone.
    """

    initial_total = strategy.starting_balance
    if initial_total <= 0:
        return []

    remaining: Dict[str, Decimal] = {d.id: d.balance for d in strategy.debts}
    pending = list(THRESHOLDS)
    milestones: List[Milestone] = []

    for row in strategy.schedule:
        if not pending:
            break
        remaining[row.debt_id] = row.remaining_balance
        remaining_total = sum(remaining.values(), Decimal("0"))
        paid = initial_total - remaining_total
        while pending and paid >= pending[0] * initial_total:
            title, description = _describe(pending.pop(0))
            milestones.append(
                Milestone(
                    title=title,
                    description=description,
                    target_date=row.date,
                    amount_paid=paid,
                    remaining_debt=remaining_total,
                )
            )

    return milestones
