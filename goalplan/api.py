"""REST surface for the goal planning engine."""

from __future__ import annotations

import datetime
import json
import math
from functools import lru_cache
from typing import Any, Dict, List

import pandas as pd
from flask import Flask, jsonify, request

from goalplan.config import settings_from_env
from goalplan.data_model import (
    ASSET_CATEGORIES,
    DATE_KINDS,
    GOAL_TYPES,
    RESOURCE_BUCKETS,
    Goal,
    GoalTableModel,
    HouseholdProfile,
    IncomeTableModel,
    RelativeDate,
    TableModel,
    apply_income_table,
    dataframe_to_goals,
)
from goalplan.engine import (
    aggregate_ledger,
    asset_allocation,
    build_funding_plan,
    household_snapshot,
    project,
    projection_to_frame,
    resolve_year,
    summarize_phases,
    weighted_average_return,
)

app = Flask(__name__)

SETTINGS = settings_from_env()

GOAL_MODEL = GoalTableModel()
INCOME_MODEL = IncomeTableModel()


class PayloadError(ValueError):
    """Raised when a request carries parameters that cannot be interpreted."""


def _sanitize_json_compat(value: Any):
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return value
    if isinstance(value, dict):
        return {key: _sanitize_json_compat(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_sanitize_json_compat(item) for item in value]
    return value


def _extract_payload_value(payload: dict, *keys: str, default=None):
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return default


def _number(payload: dict, *keys: str, default=None, cast=float):
    value = _extract_payload_value(payload, *keys, default=default)
    if value is None:
        return None
    try:
        return cast(value)
    except (TypeError, ValueError) as exc:
        raise PayloadError(f"Invalid value for '{keys[0]}'.") from exc


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise PayloadError("Request body must be a JSON object.")
    return payload


def _current_year() -> int:
    return datetime.date.today().year


def _with_base_year(payload: dict) -> dict:
    """Fill in an omitted base year before the payload becomes a cache key."""
    if payload.get("baseYear") is None:
        return {**payload, "baseYear": _current_year()}
    return payload


def _table_frame(payload: dict, key: str) -> pd.DataFrame | None:
    rows = payload.get(key)
    if rows is None:
        return None
    if not isinstance(rows, list):
        raise PayloadError(f"'{key}' must be a list of table rows.")
    return pd.DataFrame([row for row in rows if isinstance(row, dict)])


def _parse_profile(payload: dict) -> HouseholdProfile:
    profile = HouseholdProfile.from_dict(payload.get("profile"))
    income_table = _table_frame(payload, "incomeTable")
    if income_table is not None:
        profile = apply_income_table(profile, income_table)
    return profile


def _parse_goals(payload: dict) -> List[Goal]:
    goals_table = _table_frame(payload, "goalsTable")
    if goals_table is not None:
        return dataframe_to_goals(goals_table)
    rows = payload.get("goals") or []
    if not isinstance(rows, list):
        raise PayloadError("Goals must be a list.")
    return [Goal.from_dict(row) for row in rows if isinstance(row, dict)]


def _cache_key(payload: dict) -> str:
    return json.dumps(payload, sort_keys=True, default=str)


def _model_payload(model: TableModel) -> Dict[str, Any]:
    defaults = _sanitize_json_compat(model.create_default_df().to_dict("records"))
    return {
        "name": model.name,
        "columns": [col.to_payload() for col in model.columns],
        "defaults": defaults,
    }


@lru_cache(maxsize=SETTINGS.cache_size)
def _projection_payload(key: str) -> Dict[str, Any]:
    payload = json.loads(key)
    profile = _parse_profile(payload)
    goals = _parse_goals(payload)
    horizon = _number(payload, "horizonYears", "years", cast=int)
    growth_pct = _number(payload, "growthRate")
    base_year = _number(payload, "baseYear", cast=int)
    span = _number(payload, "span", cast=int)

    result = project(
        profile,
        goals,
        horizon,
        base_year=base_year,
        growth_rate=None if growth_pct is None else growth_pct / 100.0,
        settings=SETTINGS,
    )
    frame = projection_to_frame(result.rows)
    birth_year = profile.effective_birth_year(result.base_year, SETTINGS.default_age)
    phases = summarize_phases(frame, birth_year + profile.retirement_age)
    response = {
        "baseYear": result.base_year,
        "growthRate": result.growth_rate * 100.0,
        "rows": frame.to_dict("records"),
        "breakEven": result.break_even.to_payload(),
        "phases": phases.to_dict("records"),
    }
    if span:
        response["periods"] = aggregate_ledger(frame, span).to_dict("records")
    return _sanitize_json_compat(response)


@lru_cache(maxsize=SETTINGS.cache_size)
def _funding_payload(key: str) -> Dict[str, Any]:
    payload = json.loads(key)
    profile = _parse_profile(payload)
    plan = build_funding_plan(
        profile,
        _parse_goals(payload),
        base_year=_number(payload, "baseYear", cast=int),
        default_age=SETTINGS.default_age,
    )
    return _sanitize_json_compat(plan.to_payload())


def _error(message: str, status: int = 400):
    return jsonify({"error": message}), status


@app.after_request
def apply_cors_headers(response):
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return response


@app.errorhandler(PayloadError)
def handle_payload_error(exc: PayloadError):
    return _error(str(exc))


@app.get("/api/health")
def healthcheck():
    return jsonify({"status": "ok"})


@app.get("/api/schema")
def get_schema():
    payload = {
        "planDefaults": {
            "horizonYears": SETTINGS.horizon_years,
            "growthRate": SETTINGS.growth_rate * 100.0,
            "defaultAge": SETTINGS.default_age,
        },
        "goals": _model_payload(GOAL_MODEL),
        "income": _model_payload(INCOME_MODEL),
        "dateKinds": DATE_KINDS,
        "goalTypes": GOAL_TYPES,
        "resourceBuckets": RESOURCE_BUCKETS,
        "assetCategories": ASSET_CATEGORIES,
    }
    return jsonify(payload)


@app.post("/api/resolve")
def resolve_date():
    payload = _json_body()
    if "date" not in payload:
        return _error("A date is required.")
    profile = HouseholdProfile.from_dict(payload.get("profile"))
    base_year = _number(payload, "baseYear", default=_current_year(), cast=int)
    date = RelativeDate.from_dict(payload["date"])
    year = resolve_year(
        date,
        profile.effective_birth_year(base_year, SETTINGS.default_age),
        profile.retirement_age,
        profile.life_expectancy,
    )
    return jsonify({"date": date.to_dict(), "year": year})


@app.post("/api/projection")
def projection_endpoint():
    payload = _with_base_year(_json_body())
    try:
        body = _projection_payload(_cache_key(payload))
    except PayloadError as exc:
        return _error(str(exc))
    except Exception:
        app.logger.exception("Projection failed")
        return _error("Projection failed.", 500)
    return jsonify(body)


@app.post("/api/funding-plan")
def funding_plan_endpoint():
    payload = _with_base_year(_json_body())
    try:
        body = _funding_payload(_cache_key(payload))
    except PayloadError as exc:
        return _error(str(exc))
    except Exception:
        app.logger.exception("Funding plan failed")
        return _error("Funding plan failed.", 500)
    return jsonify(body)


@app.post("/api/snapshot")
def snapshot_endpoint():
    payload = _json_body()
    profile = _parse_profile(payload)
    allocation = asset_allocation(profile)
    return jsonify(
        _sanitize_json_compat(
            {
                "snapshot": household_snapshot(profile).to_payload(),
                "allocation": allocation.to_dict("records"),
                "weightedReturn": weighted_average_return(profile),
            }
        )
    )


if __name__ == "__main__":
    app.run(debug=False, port=8000)
