import json
import os
import sys
from datetime import date
from pathlib import Path

import pytest

# Ensure project root on path for direct module imports
sys.path.insert(0, os.path.abspath(os.path.join(Path(__file__).resolve().parent, "..")))

from errors import InvalidInputError
from payoff import calculate_avalanche, calculate_snowball
from plans import build_plan

START = date(2024, 6, 1)


def _debts():
    return [
        {"id": "loan", "name": "Student Loan", "balance": 3000, "minimum_payment": 90, "interest_rate": 12, "account_type": "loan"},
        {"id": "card", "name": "Visa", "balance": 1000, "minimum_payment": 50, "interest_rate": 24},
        {"id": "store", "name": "Store Card", "balance": 400, "minimum_payment": 25, "interest_rate": 0},
    ]


def test_avalanche_plan_steps():
    plan = build_plan(_debts(), "avalanche", 200, start=START)
    assert plan.title == "Debt Avalanche Strategy"
    assert plan.debt_order == ["card", "loan", "store"]
    assert plan.steps == [
        "Pay minimum payments on all debts",
        "Put extra $200.00/month toward highest interest debt: Visa (24% APR)",
        "After Visa is paid off → Focus on Student Loan (12% APR)",
        "After Student Loan is paid off → Focus on Store Card",
        "Celebrate becoming debt-free!",
    ]
    assert plan.total_debt == 4400
    assert plan.monthly_payment == 365
    expected = calculate_avalanche(_debts(), 200, start=START)
    assert plan.estimated_months == expected.months_to_payoff
    assert plan.description.endswith(f"Target payoff in {expected.months_to_payoff} months.")


def test_snowball_plan_orders_by_balance():
    plan = build_plan(_debts(), "snowball", 100, start=START)
    assert plan.title == "Debt Snowball Strategy"
    assert plan.debt_order == ["store", "card", "loan"]
    assert plan.steps[1] == "Put extra $100.00/month toward smallest debt: Store Card"
    assert plan.steps[2] == "After Store Card is paid off → Focus on Visa"
    assert plan.estimated_months == calculate_snowball(_debts(), 100, start=START).months_to_payoff


def test_plan_defaults_to_200_extra():
    plan = build_plan(_debts(), "snowball", start=START)
    assert plan.monthly_payment == 365


def test_plan_flags_unpayable_debts():
    debts = [{"name": "Card", "balance": 1200, "minimum_payment": 10, "interest_rate": 24}]
    plan = build_plan(debts, "avalanche", 0, start=START)
    assert plan.did_not_converge
    assert "do not cover interest" in plan.description


def test_unknown_strategy_rejected():
    with pytest.raises(InvalidInputError, match="snowball"):
        build_plan(_debts(), "consolidate")


def test_plan_to_dict_serializes():
    data = json.loads(json.dumps(build_plan(_debts(), "avalanche", 50, start=START).to_dict()))
    assert data["strategy"] == "avalanche"
    assert data["total_debt"] == "4400"
    assert data["monthly_payment"] == "215"
    assert data["debt_order"] == ["card", "loan", "store"]
    assert "result" not in data
