from __future__ import annotations

"""Simulate month-by-month debt payoff under a prioritization strategy.

Every month each debt that still owes money receives its minimum payment:
interest is charged on the current balance and whatever is left of the
minimum reduces principal. Once all minimums are applied, the extra payment
goes to the first debt in priority order that still owes money and is folded
into that debt's row for the month. The priority order is fixed when the
simulation starts unless ``rerank`` is requested.

The loop ends when every balance reaches zero or after ``MAX_MONTHS`` months.
A strategy that hits the cap with money still owing is flagged with
``did_not_converge`` rather than raising.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from operator import attrgetter
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

from dateutil.relativedelta import relativedelta

from debts import DebtAccount, DebtLike, load_debts, to_decimal, total_balance
from errors import InvalidInputError

logger = logging.getLogger(__name__)

MAX_MONTHS = 600  # 50 years

ZERO = Decimal("0")

SNOWBALL = "Debt Snowball"
AVALANCHE = "Debt Avalanche"
CUSTOM = "Custom Strategy"
CONSOLIDATION = "Debt Consolidation"

DESCRIPTIONS = {
    SNOWBALL: (
        "Pay minimum on all debts, extra payment goes to smallest balance first. "
        "Provides psychological wins and momentum."
    ),
    AVALANCHE: (
        "Pay minimum on all debts, extra payment goes to highest interest rate "
        "first. Mathematically optimal, saves the most money."
    ),
    CUSTOM: (
        "Pay debts in your preferred order. Customize based on your priorities "
        "and situation."
    ),
    CONSOLIDATION: "Combine all debts into a single loan with potentially lower interest rate.",
}


@dataclass
class PaymentScheduleEntry:
    """One payment made to one debt in one simulated month."""

    month: int
    date: date
    debt_id: str
    debt_name: str
    payment: Decimal
    principal: Decimal
    interest: Decimal
    remaining_balance: Decimal

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "date": self.date.isoformat(),
            "debt_id": self.debt_id,
            "debt_name": self.debt_name,
            "payment": str(self.payment),
            "principal": str(self.principal),
            "interest": str(self.interest),
            "remaining_balance": str(self.remaining_balance),
        }


@dataclass
class PayoffStrategy:
    """Result of one full simulation run."""

    name: str
    description: str
    total_interest: Decimal
    total_payments: Decimal
    months_to_payoff: int
    payoff_date: date
    schedule: List[PaymentScheduleEntry] = field(default_factory=list)
    debts: List[DebtAccount] = field(default_factory=list)  # in priority order
    starting_balance: Decimal = ZERO
    did_not_converge: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "total_interest": str(self.total_interest),
            "total_payments": str(self.total_payments),
            "months_to_payoff": self.months_to_payoff,
            "payoff_date": self.payoff_date.isoformat(),
            "starting_balance": str(self.starting_balance),
            "did_not_converge": self.did_not_converge,
            "debt_order": [d.id for d in self.debts],
            "schedule": [row.to_dict() for row in self.schedule],
        }


@dataclass
class _WorkingDebt:
    """Mutable balance tracker for a debt during one simulation."""

    account: DebtAccount
    balance: Decimal

    @property
    def interest_rate(self) -> Decimal:
        return self.account.interest_rate


# ---------------------------------------------------------------------------
# Orderings


Ordering = Callable[[Sequence[_WorkingDebt]], List[_WorkingDebt]]


def snowball_order(debts: Sequence[_WorkingDebt]) -> List[_WorkingDebt]:
    """Smallest balance first; ties keep input order."""
    return sorted(debts, key=attrgetter("balance"))


def avalanche_order(debts: Sequence[_WorkingDebt]) -> List[_WorkingDebt]:
    """Highest interest rate first; ties keep input order."""
    return sorted(debts, key=attrgetter("interest_rate"), reverse=True)


def input_order(debts: Sequence[_WorkingDebt]) -> List[_WorkingDebt]:
    return list(debts)


ORDERINGS: Dict[str, Ordering] = {
    "snowball": snowball_order,
    "avalanche": avalanche_order,
    "custom": input_order,
}


def _resolve_ordering(ordering: Union[str, Ordering]) -> Ordering:
    if callable(ordering):
        return ordering
    try:
        return ORDERINGS[ordering]
    except KeyError:
        raise InvalidInputError(f"Unknown ordering: {ordering!r}")


def add_months(start: date, months: int) -> date:
    """Return ``start`` moved forward by ``months`` calendar months."""
    return start + relativedelta(months=months)


# ---------------------------------------------------------------------------
# Core algorithm


def simulate(
    debts_input: Iterable[DebtLike],
    extra_payment: float | Decimal = 0,
    ordering: Union[str, Ordering] = "custom",
    *,
    name: Optional[str] = None,
    start: Optional[date] = None,
    rerank: bool = False,
) -> PayoffStrategy:
    """Amortize all debts in parallel and return the resulting strategy.

    Parameters
    ----------
    debts_input:
        ``DebtAccount`` objects or dictionaries with ``name``, ``balance``,
        ``minimum_payment`` and ``interest_rate`` (or ``apr``) keys.
    extra_payment:
        Monthly amount beyond all minimums, applied to one debt per month.
    ordering:
        Key into ``ORDERINGS`` or a callable returning the debts in priority
        order.
    name:
        Strategy label. Defaults to ``"Custom Strategy"``.
    start:
        Anchor date for projecting payment dates. Defaults to today.
    rerank:
        Re-apply ``ordering`` to the current balances every month instead of
        fixing the order at the start.

    Raises
    ------
    InvalidInputError
        If the debt list is empty or invalid, or ``extra_payment`` is negative.
    """

    extra = to_decimal(extra_payment, "extra_payment")
    if extra < 0:
        raise InvalidInputError("extra_payment must not be negative")
    order = _resolve_ordering(ordering)
    accounts = load_debts(debts_input)
    start = start or date.today()
    name = name or CUSTOM

    working = order([_WorkingDebt(account=a, balance=a.balance) for a in accounts])
    ordered_accounts = [w.account for w in working]
    starting_balance = total_balance(accounts)

    schedule: List[PaymentScheduleEntry] = []
    total_interest = ZERO
    total_payments = ZERO

    month = 0
    while month < MAX_MONTHS and any(w.balance > 0 for w in working):
        month += 1
        current_date = add_months(start, month)
        if rerank:
            working = order(working)

        # Row index per debt for this month so the extra payment can be folded in
        rows: Dict[str, int] = {}

        # Minimum payments on every debt still owing
        for debt in working:
            if debt.balance <= 0:
                continue
            interest = debt.balance * debt.account.monthly_rate
            principal = min(debt.account.minimum_payment - interest, debt.balance)
            debt.balance -= principal
            payment = principal + interest
            total_interest += interest
            total_payments += payment

            rows[debt.account.id] = len(schedule)
            schedule.append(
                PaymentScheduleEntry(
                    month=month,
                    date=current_date,
                    debt_id=debt.account.id,
                    debt_name=debt.account.name,
                    payment=payment,
                    principal=principal,
                    interest=interest,
                    remaining_balance=max(ZERO, debt.balance),
                )
            )

        # Extra payment to the priority debt
        if extra > 0:
            target = next((d for d in working if d.balance > 0), None)
            if target is not None:
                extra_principal = min(extra, target.balance)
                target.balance -= extra_principal
                total_payments += extra_principal

                row = schedule[rows[target.account.id]]
                row.payment += extra_principal
                row.principal += extra_principal
                row.remaining_balance = max(ZERO, target.balance)

    did_not_converge = any(w.balance > 0 for w in working)
    if did_not_converge:
        stuck = ", ".join(w.account.name for w in working if w.balance > 0)
        logger.warning(
            "%s did not pay off within %d months; still owing: %s",
            name,
            MAX_MONTHS,
            stuck,
        )

    logger.debug(
        "%s: %d debts paid in %d months, interest=%s payments=%s",
        name,
        len(accounts),
        month,
        total_interest,
        total_payments,
    )

    return PayoffStrategy(
        name=name,
        description=DESCRIPTIONS.get(name, "Custom debt payoff strategy."),
        total_interest=total_interest,
        total_payments=total_payments,
        months_to_payoff=month,
        payoff_date=add_months(start, month),
        schedule=schedule,
        debts=ordered_accounts,
        starting_balance=starting_balance,
        did_not_converge=did_not_converge,
    )


# ---------------------------------------------------------------------------
# Named strategies


def calculate_snowball(
    debts: Iterable[DebtLike],
    extra_payment: float | Decimal = 0,
    start: Optional[date] = None,
) -> PayoffStrategy:
    """Pay minimums on all debts, extra goes to the smallest balance."""
    return simulate(debts, extra_payment, "snowball", name=SNOWBALL, start=start)


def calculate_avalanche(
    debts: Iterable[DebtLike],
    extra_payment: float | Decimal = 0,
    start: Optional[date] = None,
) -> PayoffStrategy:
    """Pay minimums on all debts, extra goes to the highest interest rate."""
    return simulate(debts, extra_payment, "avalanche", name=AVALANCHE, start=start)


def calculate_custom(
    debts: Iterable[DebtLike],
    extra_payment: float | Decimal = 0,
    order: Optional[Sequence[str]] = None,
    start: Optional[date] = None,
) -> PayoffStrategy:
    """Pay debts in a caller-defined order.

    ``order`` lists debt ids from highest to lowest priority and must name
    every debt exactly once. Without it the input order is used.
    """

    if order is None:
        return simulate(debts, extra_payment, "custom", name=CUSTOM, start=start)

    order = list(order)
    if len(set(order)) != len(order):
        raise InvalidInputError("Custom order lists a debt more than once")
    rank = {debt_id: i for i, debt_id in enumerate(order)}

    def explicit_order(working: Sequence[_WorkingDebt]) -> List[_WorkingDebt]:
        ids = {w.account.id for w in working}
        missing = ids - rank.keys()
        unknown = rank.keys() - ids
        if missing or unknown:
            raise InvalidInputError(
                f"Custom order must name every debt exactly once "
                f"(missing: {sorted(missing)}, unknown: {sorted(unknown)})"
            )
        return sorted(working, key=lambda w: rank[w.account.id])

    return simulate(debts, extra_payment, explicit_order, name=CUSTOM, start=start)
