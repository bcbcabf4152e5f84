from __future__ import annotations

"""Build a step-by-step payoff plan for a chosen strategy.

A plan is the summary a user acts on: which debt gets the extra money first,
what happens after each debt is paid off, the monthly outlay and how long it
takes. Storing plans is left to the caller; ``PayoffPlan.to_dict`` returns
JSON-ready data.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from debts import DebtAccount, DebtLike, load_debts, to_decimal, total_balance
from errors import InvalidInputError
from payoff import PayoffStrategy, calculate_avalanche, calculate_snowball

DEFAULT_EXTRA_PAYMENT = Decimal("200")

PLAN_TYPES = {
    "snowball": (
        "Debt Snowball Strategy",
        "Pay off smallest debts first for quick wins.",
        "smallest debt",
    ),
    "avalanche": (
        "Debt Avalanche Strategy",
        "Pay off highest interest debts first to save money.",
        "highest interest debt",
    ),
}


@dataclass
class PayoffPlan:
    strategy: str
    title: str
    description: str
    steps: List[str]
    total_debt: Decimal
    monthly_payment: Decimal
    estimated_months: int
    debt_order: List[str]
    did_not_converge: bool = False
    result: Optional[PayoffStrategy] = field(default=None, repr=False)

    def to_dict(self) -> dict:
        return {
            "strategy": self.strategy,
            "title": self.title,
            "description": self.description,
            "steps": list(self.steps),
            "total_debt": str(self.total_debt),
            "monthly_payment": str(self.monthly_payment),
            "estimated_months": self.estimated_months,
            "debt_order": list(self.debt_order),
            "did_not_converge": self.did_not_converge,
        }


def _label(debt: DebtAccount, show_rate: bool) -> str:
    if show_rate and debt.interest_rate > 0:
        return f"{debt.name} ({debt.interest_rate}% APR)"
    return debt.name


def _money(amount: Decimal) -> str:
    return f"${amount:,.2f}"


def build_steps(
    ordered: List[DebtAccount], extra: Decimal, target_label: str, show_rate: bool
) -> List[str]:
    steps = ["Pay minimum payments on all debts"]
    if ordered:
        steps.append(
            f"Put extra {_money(extra)}/month toward {target_label}: "
            f"{_label(ordered[0], show_rate)}"
        )
    for previous, debt in zip(ordered, ordered[1:]):
        steps.append(
            f"After {previous.name} is paid off → Focus on {_label(debt, show_rate)}"
        )
    steps.append("Celebrate becoming debt-free!")
    return steps


def build_plan(
    debts_input: Iterable[DebtLike],
    strategy: str,
    extra_payment: float | Decimal = DEFAULT_EXTRA_PAYMENT,
    *,
    start: Optional[date] = None,
) -> PayoffPlan:
    """Return a ``PayoffPlan`` for ``strategy`` (``snowball`` or ``avalanche``)."""

    try:
        title, summary, target_label = PLAN_TYPES[strategy]
    except KeyError:
        raise InvalidInputError(
            f'Strategy must be either "snowball" or "avalanche", got {strategy!r}'
        )

    debts = load_debts(debts_input)
    extra = to_decimal(extra_payment, "extra_payment")
    if strategy == "snowball":
        result = calculate_snowball(debts, extra, start=start)
    else:
        result = calculate_avalanche(debts, extra, start=start)

    months = result.months_to_payoff
    description = f"{summary} Target payoff in {months} months."
    if result.did_not_converge:
        description = (
            f"{summary} Minimum payments do not cover interest; "
            f"debts are not paid off within {months} months."
        )

    return PayoffPlan(
        strategy=strategy,
        title=title,
        description=description,
        steps=build_steps(
            result.debts, extra, target_label, show_rate=strategy == "avalanche"
        ),
        total_debt=total_balance(debts),
        monthly_payment=sum((d.minimum_payment for d in debts), extra),
        estimated_months=months,
        debt_order=[d.id for d in result.debts],
        did_not_converge=result.did_not_converge,
        result=result,
    )
