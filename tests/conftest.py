import pytest

from goalplan.data_model import DetailedIncome, Goal, HouseholdProfile, RelativeDate

BASE_YEAR = 2026


@pytest.fixture
def profile() -> HouseholdProfile:
    return HouseholdProfile(
        birth_year=1990,
        retirement_age=60,
        life_expectancy=85,
        monthly_expenses=4000.0,
        income=DetailedIncome(salary=10000.0),
    )


@pytest.fixture
def make_goal():
    def _make_goal(goal_id: str = "goal", **overrides) -> Goal:
        values = {
            "id": goal_id,
            "target_amount": 100000.0,
            "start": RelativeDate.year(BASE_YEAR + 5),
            "end": RelativeDate.year(BASE_YEAR + 5),
            "inflation_rate": 6.0,
        }
        values.update(overrides)
        return Goal(**values)

    return _make_goal
