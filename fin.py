"""Command-line interface for managing debts and comparing payoff strategies."""

from decimal import Decimal
from pathlib import Path
import json
import logging
from typing import Dict, List, Optional

from comparison import compare_strategies
from debts import ACCOUNT_TYPES, to_decimal
from errors import PayoffError
from log_config import setup_logging
from milestones import generate_milestones
from payoff import PayoffStrategy, calculate_avalanche, calculate_snowball
from plans import build_plan
from settings import PlannerConfig

logger = logging.getLogger(__name__)

DATA_FILE: Path = PlannerConfig().data_file
DEFAULT_EXTRA = Decimal("0")

CALCULATORS = {"snowball": calculate_snowball, "avalanche": calculate_avalanche}


def load_data() -> Dict:
    """Load debts from the data file."""
    if DATA_FILE.exists():
        with DATA_FILE.open() as f:
            return json.load(f)
    return {"debts": []}


def save_data(data: Dict) -> None:
    """Persist debts to the data file."""
    with DATA_FILE.open("w") as f:
        json.dump(data, f, indent=2)


# ---------------------------------------------------------------------------
# Editing helpers


def _delete_item(items: List[dict]) -> None:
    idx = input("Number to delete: ").strip()
    if idx.isdigit() and 1 <= int(idx) <= len(items):
        del items[int(idx) - 1]


def _pick_item(items: List[dict]) -> Optional[dict]:
    idx = input("Number to edit: ").strip()
    if idx.isdigit() and 1 <= int(idx) <= len(items):
        return items[int(idx) - 1]
    return None


def _new_debt_id(debts: List[dict], name: str) -> str:
    taken = {str(d.get("id") or d["name"]) for d in debts}
    if name not in taken:
        return name
    n = 2
    while f"{name}-{n}" in taken:
        n += 1
    return f"{name}-{n}"


def _ask_account_type(default: str) -> str:
    while True:
        value = input(f"Account type {ACCOUNT_TYPES} [{default}]: ").strip()
        if not value:
            return default
        if value in ACCOUNT_TYPES:
            return value
        print("Unknown account type. Please try again.")


def edit_debts(data: Dict) -> None:
    """Add, edit or remove debt entries."""
    debts = data.setdefault("debts", [])
    while True:
        print("\nCurrent debts:")
        for i, d in enumerate(debts, 1):
            print(
                f"{i}. {d['name']} balance ${d['balance']} min ${d['minimum_payment']} "
                f"APR {d.get('interest_rate', d.get('apr'))} ({d.get('account_type', 'credit_card')})"
            )
        action = input("A)dd, E)dit, D)elete, B)ack: ").strip().lower()
        if action == "a":
            name = input("Name: ").strip() or "Debt"
            balance = float(input("Balance: ").strip())
            minimum = float(input("Minimum payment: ").strip())
            rate = float(input("APR: ").strip())
            account_type = _ask_account_type("credit_card")
            debts.append(
                {
                    "id": _new_debt_id(debts, name),
                    "name": name,
                    "balance": balance,
                    "minimum_payment": minimum,
                    "interest_rate": rate,
                    "account_type": account_type,
                }
            )
            save_data(data)
        elif action == "e":
            debt = _pick_item(debts)
            if debt is None:
                continue
            name = input(f"Name [{debt['name']}]: ").strip()
            balance = input(f"Balance [{debt['balance']}]: ").strip()
            minimum = input(f"Minimum payment [{debt['minimum_payment']}]: ").strip()
            rate = input(f"APR [{debt.get('interest_rate', debt.get('apr'))}]: ").strip()
            if name:
                debt["name"] = name
            if balance:
                debt["balance"] = float(balance)
            if minimum:
                debt["minimum_payment"] = float(minimum)
            if rate:
                debt["interest_rate"] = float(rate)
            debt["account_type"] = _ask_account_type(
                debt.get("account_type", "credit_card")
            )
            save_data(data)
        elif action == "d":
            _delete_item(debts)
            save_data(data)
        elif action == "b":
            break


# ---------------------------------------------------------------------------
# Reports


def _ask_extra() -> Decimal:
    value = input(f"Extra monthly payment [{DEFAULT_EXTRA}]: ").strip()
    return to_decimal(value, "extra payment") if value else DEFAULT_EXTRA


def _ask_strategy() -> str:
    value = input("Strategy (snowball/avalanche) [avalanche]: ").strip().lower()
    return value or "avalanche"


def _print_strategy(strategy: PayoffStrategy) -> None:
    print(f"\n{strategy.name}: {strategy.description}")
    print(
        f"  Paid off in {strategy.months_to_payoff} months "
        f"({strategy.payoff_date.isoformat()})"
    )
    print(f"  Total interest: ${strategy.total_interest:.2f}")
    print(f"  Total payments: ${strategy.total_payments:.2f}")
    print(f"  Payoff order: {', '.join(d.name for d in strategy.debts)}")
    if strategy.did_not_converge:
        print(
            "  Warning: minimum payments do not cover interest; "
            "this plan never reaches zero as configured."
        )


def run_comparison(data: Dict) -> None:
    """Compare the snowball and avalanche strategies."""
    print("---  Debt Payoff Comparison ---")
    try:
        extra = _ask_extra()
        comparison = compare_strategies(data.get("debts", []), extra)
    except PayoffError as exc:
        print(f"Warning: {exc}")
        return

    _print_strategy(comparison.snowball)
    _print_strategy(comparison.avalanche)
    savings = comparison.savings
    print(f"\nAvalanche saves {savings.time_saved} months and ${savings.interest_saved:.2f} interest.")
    print(f"Recommended strategy: {savings.recommended_strategy}")


def show_milestones(data: Dict) -> None:
    """Print percent-paid milestones for one strategy."""
    strategy_name = _ask_strategy()
    calculate = CALCULATORS.get(strategy_name)
    if calculate is None:
        print(
            f"Warning: Strategy must be either \"snowball\" or \"avalanche\", "
            f"got {strategy_name!r}"
        )
        return
    try:
        extra = _ask_extra()
        strategy = calculate(data.get("debts", []), extra)
    except PayoffError as exc:
        print(f"Warning: {exc}")
        return

    milestones = generate_milestones(strategy)
    if not milestones:
        print("No milestones reached.")
    for m in milestones:
        print(
            f"{m.target_date.isoformat()}: {m.title} paid ${m.amount_paid:.2f}, "
            f"remaining ${m.remaining_debt:.2f} - {m.description}"
        )


def generate_plan(data: Dict) -> None:
    """Print a payoff plan as JSON."""
    strategy_name = _ask_strategy()
    try:
        extra = _ask_extra()
        plan = build_plan(data.get("debts", []), strategy_name, extra)
    except PayoffError as exc:
        print(f"Warning: {exc}")
        return
    print(json.dumps(plan.to_dict(), indent=2, ensure_ascii=False))


# ---------------------------------------------------------------------------
# Menu


def main() -> None:
    """Display the main menu and handle user selections."""
    global DATA_FILE, DEFAULT_EXTRA

    config = PlannerConfig.from_env()
    setup_logging(config.log_level, config.log_format)
    DATA_FILE = config.data_file
    DEFAULT_EXTRA = config.default_extra_payment
    logger.info("Using data file %s", DATA_FILE)

    data = load_data()
    while True:
        print("\n--- Debt Payoff Menu ---")
        print("1. Edit debts")
        print("2. Compare strategies")
        print("3. Show milestones")
        print("4. Generate plan")
        print("5. Quit")
        choice = input("Select an option: ").strip()
        if choice == "1":
            edit_debts(data)
        elif choice == "2":
            run_comparison(data)
        elif choice == "3":
            show_milestones(data)
        elif choice == "4":
            generate_plan(data)
        elif choice == "5":
            break
        else:
            print("Invalid option.")


if __name__ == "__main__":
    main()
