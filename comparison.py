from __future__ import annotations

"""Compare payoff strategies and derive savings and recommendations."""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from debts import DebtAccount, DebtLike, load_debts, to_decimal, total_balance
from errors import InvalidInputError
from payoff import (
    CONSOLIDATION,
    PayoffStrategy,
    calculate_avalanche,
    calculate_custom,
    calculate_snowball,
    simulate,
)

logger = logging.getLogger(__name__)

# Avalanche is recommended only when it saves more than this many dollars of
# interest over snowball.
RECOMMENDATION_THRESHOLD = Decimal("500")

TARGET_PAYMENT_CEILING = 10000


@dataclass
class Savings:
    time_saved: int  # months, snowball - avalanche
    interest_saved: Decimal  # dollars, snowball - avalanche
    recommended_strategy: str  # "snowball" or "avalanche"

    def to_dict(self) -> dict:
        return {
            "time_saved": self.time_saved,
            "interest_saved": str(self.interest_saved),
            "recommended_strategy": self.recommended_strategy,
        }


@dataclass
class PayoffComparison:
    snowball: PayoffStrategy
    avalanche: PayoffStrategy
    savings: Savings
    custom: Optional[PayoffStrategy] = None

    def to_dict(self) -> dict:
        result = {
            "snowball": self.snowball.to_dict(),
            "avalanche": self.avalanche.to_dict(),
            "savings": self.savings.to_dict(),
        }
        if self.custom is not None:
            result["custom"] = self.custom.to_dict()
        return result


@dataclass
class ConsolidationResult:
    current: PayoffStrategy
    consolidated: PayoffStrategy
    savings: Decimal  # interest saved by consolidating

    def to_dict(self) -> dict:
        return {
            "current": self.current.to_dict(),
            "consolidated": self.consolidated.to_dict(),
            "savings": str(self.savings),
        }


def compare_strategies(
    debts_input: Iterable[DebtLike],
    extra_payment: float | Decimal = 0,
    *,
    custom_order: Optional[Sequence[str]] = None,
    start: Optional[date] = None,
) -> PayoffComparison:
    """Run snowball and avalanche on the same debts and compare them.

    When ``custom_order`` is given a third, custom-ordered run is included.
    Savings may be zero or negative; neither is an error.
    """

    debts: List[DebtAccount] = load_debts(debts_input)
    start = start or date.today()

    snowball = calculate_snowball(debts, extra_payment, start=start)
    avalanche = calculate_avalanche(debts, extra_payment, start=start)
    custom = None
    if custom_order is not None:
        custom = calculate_custom(debts, extra_payment, custom_order, start=start)

    time_saved = snowball.months_to_payoff - avalanche.months_to_payoff
    interest_saved = snowball.total_interest - avalanche.total_interest
    recommended = (
        "avalanche" if interest_saved > RECOMMENDATION_THRESHOLD else "snowball"
    )
    logger.debug(
        "Compared %d debts: time_saved=%d interest_saved=%s recommend=%s",
        len(debts),
        time_saved,
        interest_saved,
        recommended,
    )

    return PayoffComparison(
        snowball=snowball,
        avalanche=avalanche,
        savings=Savings(
            time_saved=time_saved,
            interest_saved=interest_saved,
            recommended_strategy=recommended,
        ),
        custom=custom,
    )


def calculate_target_payment(
    debts_input: Iterable[DebtLike],
    target_months: int,
    start: Optional[date] = None,
) -> int:
    """Return the smallest whole-dollar extra payment that is debt free in time.

    Uses the avalanche strategy and a binary search between 0 and
    ``TARGET_PAYMENT_CEILING``. Returns 0 if no payment in that range meets
    the target.
    """

    if target_months < 0:
        raise InvalidInputError("target_months must not be negative")
    debts = load_debts(debts_input)

    low, high = 0, TARGET_PAYMENT_CEILING
    result: Optional[int] = None
    while low <= high:
        mid = (low + high) // 2
        strategy = calculate_avalanche(debts, mid, start=start)
        if strategy.months_to_payoff <= target_months and not strategy.did_not_converge:
            result = mid
            high = mid - 1
        else:
            low = mid + 1

    if result is None:
        logger.warning(
            "No extra payment up to %d pays off debts within %d months",
            TARGET_PAYMENT_CEILING,
            target_months,
        )
        return 0
    return result


def calculate_consolidation_savings(
    debts_input: Iterable[DebtLike],
    consolidation_rate: float | Decimal,
    consolidation_payment: float | Decimal,
    start: Optional[date] = None,
) -> ConsolidationResult:
    """Compare paying debts as-is (avalanche, no extra) to a single loan."""

    debts = load_debts(debts_input)
    current = calculate_avalanche(debts, start=start)

    consolidated_debt = DebtAccount(
        id="consolidated",
        name="Consolidated Loan",
        balance=total_balance(debts),
        minimum_payment=to_decimal(consolidation_payment, "consolidation_payment"),
        interest_rate=to_decimal(consolidation_rate, "consolidation_rate"),
        account_type="loan",
    )
    consolidated = simulate(
        [consolidated_debt], 0, name=CONSOLIDATION, start=start
    )

    return ConsolidationResult(
        current=current,
        consolidated=consolidated,
        savings=current.total_interest - consolidated.total_interest,
    )
