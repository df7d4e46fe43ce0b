import pytest

from goalplan import api
from goalplan.api import _sanitize_json_compat, app

PROFILE = {
    "birthYear": 1990,
    "retirementAge": 60,
    "lifeExpectancy": 85,
    "monthlyExpenses": 4000,
    "income": {"salary": 10000},
}

GOALS = [
    {
        "id": "car",
        "type": "Car",
        "priority": 2,
        "targetAmountToday": 30000,
        "inflationRate": 5,
        "startDate": {"type": "Year", "value": 2028},
        "endDate": {"type": "Year", "value": 2028},
        "resourceBuckets": ["Bank Balance"],
    },
    {
        "id": "retire",
        "type": "Retirement",
        "priority": 1,
        "targetAmountToday": 40000,
        "inflationRate": 6,
        "isRecurring": True,
        "startDate": {"type": "Retirement", "value": 0},
        "endDate": {"type": "LifeExpectancy", "value": 0},
        "resourceBuckets": ["Equity & MF", "NPS & EPF"],
    },
]


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as test_client:
        yield test_client


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_schema_lists_date_kinds_and_goal_table(client):
    payload = client.get("/api/schema").get_json()

    assert payload["dateKinds"] == ["Year", "Age", "Retirement", "LifeExpectancy"]
    assert payload["goals"]["name"] == "goals"
    assert len(payload["goals"]["defaults"]) == 2
    assert "Cashflow Surplus" in payload["resourceBuckets"]


def test_resolve(client):
    response = client.post(
        "/api/resolve",
        json={"profile": PROFILE, "date": {"type": "Age", "value": 60}, "baseYear": 2026},
    )

    assert response.get_json() == {"date": {"type": "Age", "value": 60}, "year": 2050}


def test_resolve_requires_date(client):
    response = client.post("/api/resolve", json={"profile": PROFILE})

    assert response.status_code == 400


def test_projection(client):
    response = client.post(
        "/api/projection",
        json={"profile": PROFILE, "goals": GOALS, "horizonYears": 5, "baseYear": 2026, "span": 5},
    )
    payload = response.get_json()

    assert response.status_code == 200
    assert [row["Year"] for row in payload["rows"]] == [2026, 2027, 2028, 2029, 2030, 2031]
    assert payload["rows"][2]["GoalRequirement"] == round(30000 * 1.05**2)
    assert payload["breakEven"] == {"reached": True, "year": 2026, "label": "2026"}
    assert [phase["Phase"] for phase in payload["phases"]] == ["accumulation"]
    assert [period["Period"] for period in payload["periods"]] == ["2026-2030", "2031-2031"]


def test_projection_is_memoized(client):
    body = {"profile": PROFILE, "goals": GOALS, "horizonYears": 3, "baseYear": 2030}

    first = client.post("/api/projection", json=body).get_json()
    second = client.post("/api/projection", json=dict(reversed(list(body.items())))).get_json()

    assert first == second


def test_projection_rejects_bad_numbers(client):
    response = client.post("/api/projection", json={"profile": PROFILE, "horizonYears": "many"})

    assert response.status_code == 400
    assert "horizonYears" in response.get_json()["error"]


def test_projection_rejects_non_list_goals(client):
    response = client.post("/api/projection", json={"profile": PROFILE, "goals": {"id": "x"}})

    assert response.status_code == 400


def test_funding_plan(client):
    payload = client.post(
        "/api/funding-plan", json={"profile": PROFILE, "goals": GOALS, "baseYear": 2026}
    ).get_json()

    assert [goal["id"] for goal in payload["goals"]] == ["retire", "car"]
    assert payload["goals"][0]["startYear"] == 2050
    assert payload["goals"][0]["endYear"] == 2075
    assert payload["buckets"]["Equity & MF"] == ["retire"]
    assert payload["totalLifetimeCorpus"] == pytest.approx(
        sum(goal["lifetimeCorpus"] for goal in payload["goals"])
    )


def test_snapshot(client):
    payload = client.post(
        "/api/snapshot",
        json={"profile": {**PROFILE, "assets": [{"name": "Savings", "category": "Liquid", "currentValue": 1000}]}},
    ).get_json()

    assert payload["snapshot"]["monthly_surplus"] == 6000.0
    assert payload["allocation"][0]["Allocation (%)"] == 100.0


def test_sanitize_json_compat_replaces_special_numbers():
    clean = _sanitize_json_compat({"a": float("nan"), "b": [1, float("inf")], "c": ({"d": -float("inf")},)})

    assert clean == {"a": None, "b": [1, None], "c": [{"d": None}]}


@pytest.mark.parametrize("route", ["/api/resolve", "/api/projection", "/api/funding-plan", "/api/snapshot"])
def test_non_object_body_is_rejected(client, route):
    response = client.post(route, json=[PROFILE])

    assert response.status_code == 400
    assert response.get_json() == {"error": "Request body must be a JSON object."}


def test_omitted_base_year_follows_current_year(client, monkeypatch):
    body = {"profile": PROFILE, "horizonYears": 1}

    monkeypatch.setattr(api, "_current_year", lambda: 2031)
    first = client.post("/api/projection", json=body).get_json()
    monkeypatch.setattr(api, "_current_year", lambda: 2032)
    second = client.post("/api/projection", json=body).get_json()

    assert first["baseYear"] == 2031
    assert second["baseYear"] == 2032
    assert [row["Year"] for row in second["rows"]] == [2032, 2033]


def test_funding_plan_omitted_base_year_follows_current_year(client, monkeypatch):
    monkeypatch.setattr(api, "_current_year", lambda: 2040)

    payload = client.post("/api/funding-plan", json={"profile": PROFILE, "goals": GOALS}).get_json()

    assert payload["baseYear"] == 2040


def test_funding_plan_accepts_goal_table_rows(client):
    table = [
        {
            "Id": "home",
            "Target Amount": 50000,
            "Priority": 2,
            "Start Kind": "Year",
            "Start Offset": 2030,
            "End Kind": "Year",
            "End Offset": 2030,
        },
        {
            "Id": "trip",
            "Target Amount": 5000,
            "Priority": 1,
            "Start Kind": "Age",
            "Start Offset": 40,
            "End Kind": "Age",
            "End Offset": 40,
        },
        {"Id": "empty", "Target Amount": 0},
    ]

    payload = client.post(
        "/api/funding-plan", json={"profile": PROFILE, "goals": GOALS, "goalsTable": table, "baseYear": 2026}
    ).get_json()

    assert [goal["id"] for goal in payload["goals"]] == ["trip", "home"]
    assert payload["goals"][0]["startYear"] == 2030


def test_projection_accepts_income_table_rows(client):
    income_table = [
        {"Member": "Self", "Relation": "self", "Salary": 8000},
        {"Member": "Partner", "Relation": "spouse", "Business": 3000},
    ]

    payload = client.post(
        "/api/projection",
        json={"profile": PROFILE, "incomeTable": income_table, "horizonYears": 0, "baseYear": 2026},
    ).get_json()

    assert payload["rows"][0]["Inflow"] == 132000


def test_snapshot_accepts_income_table_rows(client):
    income_table = [{"Member": "Self", "Salary": 8000}, {"Member": "Partner", "Business": 3000}]

    payload = client.post("/api/snapshot", json={"profile": PROFILE, "incomeTable": income_table}).get_json()

    assert payload["snapshot"]["monthly_income"] == 11000.0
    assert payload["snapshot"]["monthly_surplus"] == 7000.0


def test_table_rows_must_be_a_list(client):
    response = client.post("/api/funding-plan", json={"profile": PROFILE, "goalsTable": {"Id": "x"}})

    assert response.status_code == 400
    assert "goalsTable" in response.get_json()["error"]
