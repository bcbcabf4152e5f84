from __future__ import annotations

"""Debt records consumed by the payoff simulator.

Debts arrive either as ``DebtAccount`` instances or as plain dictionaries (the
shape stored in ``financial_data.json``). Everything is converted to
``Decimal`` and checked here so the simulator can assume clean input.
"""

from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Mapping, Union

from errors import InvalidInputError

ACCOUNT_TYPES = ("credit_card", "loan", "line_of_credit")


@dataclass(frozen=True)
class DebtAccount:
    """A single debt obligation."""

    id: str
    name: str
    balance: Decimal
    minimum_payment: Decimal
    interest_rate: Decimal  # APR in percent, e.g. 18.99
    account_type: str = "credit_card"

    @property
    def monthly_rate(self) -> Decimal:
        return self.interest_rate / Decimal("1200")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "balance": str(self.balance),
            "minimum_payment": str(self.minimum_payment),
            "interest_rate": str(self.interest_rate),
            "account_type": self.account_type,
        }


DebtLike = Union[DebtAccount, Mapping]


# ---------------------------------------------------------------------------
# Helpers


def to_decimal(value, field: str) -> Decimal:
    """Convert ``value`` to ``Decimal`` or raise ``InvalidInputError``."""

    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise InvalidInputError(f"{field} is not a number: {value!r}")
    if not result.is_finite():
        raise InvalidInputError(f"{field} must be finite, got {value!r}")
    return result


def parse_debt(data: Mapping, position: int = 0) -> DebtAccount:
    """Build a ``DebtAccount`` from a dictionary.

    ``apr`` is accepted as an alias for ``interest_rate`` and the id falls back
    to the debt name, matching the records written by ``fin.py``.
    """

    try:
        name = data["name"]
        balance = data["balance"]
        minimum = data["minimum_payment"]
    except KeyError as exc:
        raise InvalidInputError(f"Debt #{position + 1} is missing {exc.args[0]!r}")
    rate = data.get("interest_rate", data.get("apr", 0))
    return DebtAccount(
        id=str(data.get("id") or name),
        name=name,
        balance=to_decimal(balance, f"{name} balance"),
        minimum_payment=to_decimal(minimum, f"{name} minimum_payment"),
        interest_rate=to_decimal(rate, f"{name} interest_rate"),
        account_type=data.get("account_type", "credit_card"),
    )


def validate_debt(debt: DebtAccount) -> None:
    """Raise ``InvalidInputError`` if ``debt`` cannot be amortized."""

    if debt.balance < 0:
        raise InvalidInputError(f"{debt.name}: balance must not be negative")
    if debt.minimum_payment <= 0:
        raise InvalidInputError(f"{debt.name}: minimum payment must be positive")
    if debt.interest_rate < 0:
        raise InvalidInputError(f"{debt.name}: interest rate must not be negative")
    if debt.account_type not in ACCOUNT_TYPES:
        raise InvalidInputError(
            f"{debt.name}: unknown account type {debt.account_type!r}"
        )


def load_debts(debts_input: Iterable[DebtLike]) -> List[DebtAccount]:
    """Return validated ``DebtAccount`` copies of ``debts_input``.

    Raises
    ------
    InvalidInputError
        If the list is empty, any debt is invalid, or two debts share an id.
    """

    debts: List[DebtAccount] = []
    for position, item in enumerate(debts_input):
        if isinstance(item, DebtAccount):
            debt = replace(
                item,
                balance=to_decimal(item.balance, f"{item.name} balance"),
                minimum_payment=to_decimal(
                    item.minimum_payment, f"{item.name} minimum_payment"
                ),
                interest_rate=to_decimal(item.interest_rate, f"{item.name} interest_rate"),
            )
        else:
            debt = parse_debt(item, position)
        validate_debt(debt)
        debts.append(debt)

    if not debts:
        raise InvalidInputError("At least one debt is required")

    seen = set()
    for debt in debts:
        if debt.id in seen:
            raise InvalidInputError(f"Duplicate debt id: {debt.id!r}")
        seen.add(debt.id)
    return debts


def total_balance(debts: Iterable[DebtAccount]) -> Decimal:
    return sum((d.balance for d in debts), Decimal("0"))
