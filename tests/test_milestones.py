import os
import sys
from datetime import date
from pathlib import Path

# Ensure project root on path for direct module imports
sys.path.insert(0, os.path.abspath(os.path.join(Path(__file__).resolve().parent, "..")))

from milestones import generate_milestones
from payoff import calculate_avalanche, calculate_snowball, simulate

START = date(2024, 1, 1)


def test_quarter_milestones_for_single_debt():
    debts = [{"name": "Loan", "balance": 1000, "minimum_payment": 250, "interest_rate": 0}]
    milestones = generate_milestones(simulate(debts, 0, start=START))

    assert [m.title for m in milestones] == [
        "25% Debt Free!",
        "50% Debt Free!",
        "75% Debt Free!",
        "100% Debt Free!",
    ]
    assert [m.target_date for m in milestones] == [
        date(2024, 2, 1),
        date(2024, 3, 1),
        date(2024, 4, 1),
        date(2024, 5, 1),
    ]
    assert [m.amount_paid for m in milestones] == [250, 500, 750, 1000]
    assert [m.remaining_debt for m in milestones] == [750, 500, 250, 0]
    assert milestones[0].description == "25% of your debt has been eliminated!"
    assert milestones[-1].description == "Completely debt free! You did it!"


def test_progress_measured_against_total_of_all_debts():
    debts = [
        {"id": "a", "name": "A", "balance": 100, "minimum_payment": 100, "interest_rate": 0},
        {"id": "b", "name": "B", "balance": 300, "minimum_payment": 100, "interest_rate": 0},
    ]
    strategy = calculate_snowball(debts, 0, start=START)
    milestones = generate_milestones(strategy)

    assert [m.amount_paid for m in milestones] == [100, 200, 300, 400]
    assert [m.target_date for m in milestones] == [
        date(2024, 2, 1),
        date(2024, 2, 1),
        date(2024, 3, 1),
        date(2024, 4, 1),
    ]


def test_one_row_can_reach_several_milestones():
    debts = [{"name": "Loan", "balance": 1000, "minimum_payment": 1000, "interest_rate": 0}]
    milestones = generate_milestones(simulate(debts, 0, start=START))
    assert len(milestones) == 4
    assert {m.target_date for m in milestones} == {date(2024, 2, 1)}
    assert all(m.amount_paid == 1000 for m in milestones)


def test_no_milestones_when_balance_grows():
    debts = [{"name": "Card", "balance": 1200, "minimum_payment": 10, "interest_rate": 24}]
    assert generate_milestones(calculate_avalanche(debts, 0, start=START)) == []


def test_no_milestones_without_debt():
    debts = [{"name": "Card", "balance": 0, "minimum_payment": 10, "interest_rate": 24}]
    assert generate_milestones(simulate(debts, 0, start=START)) == []


def test_milestone_to_dict():
    debts = [{"name": "Loan", "balance": 1000, "minimum_payment": 1000, "interest_rate": 0}]
    data = generate_milestones(simulate(debts, 0, start=START))[-1].to_dict()
    assert data == {
        "title": "100% Debt Free!",
        "description": "Completely debt free! You did it!",
        "target_date": "2024-02-01",
        "amount_paid": "1000",
        "remaining_debt": "0",
    }
