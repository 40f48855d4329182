import math
from datetime import date

import pytest

from agrosphere.core.errors import NotFoundError, ValidationError
from agrosphere.modules.finance import service
from conftest import auth_headers


@pytest.fixture
def farmer(make_user):
    return make_user(1, name="Asha")


def _add(db, type, category, amount, when, description=""):
    return service.create_record(db, 1, type, category, amount, description, when)


def test_create_derives_year_and_month(db, farmer):
    record = _add(db, "Expense", " Seeds ", "1250.5", date(2026, 4, 12), " hybrid maize ")

    assert record.type == "expense"
    assert record.category == "seeds"
    assert record.amount == 1250.5
    assert record.description == "hybrid maize"
    assert (record.year, record.month) == (2026, 4)


def test_negative_amount_is_rejected(db, farmer):
    with pytest.raises(ValidationError, match="amount must be positive"):
        _add(db, "expense", "seeds", -5, date(2026, 4, 1))


@pytest.mark.parametrize(
    "type, category, amount, when",
    [
        ("loan", "seeds", 10, date(2026, 1, 1)),
        ("expense", "", 10, date(2026, 1, 1)),
        ("expense", "crop_sales", 10, date(2026, 1, 1)),
        ("earning", "dairy", 0, date(2026, 1, 1)),
        ("earning", "dairy", math.inf, date(2026, 1, 1)),
        ("earning", "dairy", float("nan"), date(2026, 1, 1)),
        ("earning", "dairy", "ten", date(2026, 1, 1)),
        ("earning", "dairy", 10, None),
        ("earning", "dairy", 10, "12/01/2026"),
    ],
)
def test_invalid_records(db, farmer, type, category, amount, when):
    with pytest.raises(ValidationError):
        _add(db, type, category, amount, when)
    assert service.list_records(db, 1) == []


def test_list_and_delete_records(db, farmer, make_user):
    make_user(2)
    older = _add(db, "expense", "fuel", 40, date(2026, 3, 2))
    newer = _add(db, "earning", "dairy", 90, date(2026, 4, 2))

    assert [r.id for r in service.list_records(db, 1)] == [newer.id, older.id]
    assert [r.id for r in service.list_records(db, 1, month=3)] == [older.id]
    assert [r.id for r in service.list_records(db, 1, type="earning")] == [newer.id]

    with pytest.raises(NotFoundError):
        service.delete_record(db, 2, older.id)

    service.delete_record(db, 1, older.id)
    assert [r.id for r in service.list_records(db, 1)] == [newer.id]


def test_trailing_months_crosses_year_boundary():
    months = service.trailing_months(date(2026, 2, 15), 12)
    assert months[0] == (2025, 3)
    assert months[-1] == (2026, 2)
    assert len(months) == 12


def test_dashboard_summary_windows(db, farmer):
    today = date(2026, 10, 18)
    _add(db, "expense", "seeds", 100, date(2026, 10, 17))
    _add(db, "expense", "fuel", 50, date(2026, 10, 2))
    _add(db, "earning", "crop_sales", 400, date(2026, 10, 12))
    _add(db, "earning", "dairy", 30, date(2026, 1, 20))
    _add(db, "expense", "labor", 70, date(2025, 11, 5))
    _add(db, "expense", "labor", 25, date(2025, 10, 5))
    _add(db, "earning", "subsidy", 500, date(2021, 6, 1))

    summary = service.dashboard_summary(db, 1, today=today, years=3, recent=3)

    assert summary["current_month"] == {"expense": 150.0, "earning": 400.0}
    assert summary["current_month_by_category"]["expense"] == {"seeds": 100.0, "fuel": 50.0}
    assert summary["last_7_days"] == {"expense": 100.0, "earning": 400.0}
    assert summary["current_year"] == {"expense": 150.0, "earning": 430.0}

    months = summary["last_12_months"]
    assert len(months) == 12
    assert (months[0]["year"], months[0]["month"]) == (2025, 11)
    assert months[0]["expense"] == 70.0
    assert months[-1] == {"year": 2026, "month": 10, "expense": 150.0, "earning": 400.0}
    assert months[1] == {"year": 2025, "month": 12, "expense": 0.0, "earning": 0.0}

    assert summary["last_years"] == [
        {"year": 2024, "expense": 0.0, "earning": 0.0},
        {"year": 2025, "expense": 95.0, "earning": 0.0},
        {"year": 2026, "expense": 150.0, "earning": 430.0},
    ]

    assert [r.category for r in summary["recent_transactions"]] == ["seeds", "crop_sales", "fuel"]
    assert summary["available_years"] == [2026, 2025, 2021]


def test_finance_routes(client, farmer):
    headers = auth_headers(1)
    payload = {"type": "expense", "category": "seeds", "amount": 120, "description": "", "date": "2026-10-01"}

    resp = client.post("/finance/records", json=payload, headers=headers)
    assert resp.status_code == 201
    record_id = resp.json()["id"]
    assert resp.json()["month"] == 10

    resp = client.post("/finance/records", json={**payload, "amount": -5}, headers=headers)
    assert resp.status_code == 400
    assert resp.json() == {"kind": "validation_error", "detail": "amount must be positive"}

    resp = client.get("/finance/dashboard", params={"today": "2026-10-18"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["current_month"] == {"expense": 120.0, "earning": 0.0}

    assert client.delete(f"/finance/records/{record_id}", headers=headers).status_code == 204
    assert client.get("/finance/records", headers=headers).json() == []


def test_dashboard_leaves_out_records_after_today(db, farmer):
    today = date(2026, 10, 18)
    _add(db, "expense", "seeds", 40, date(2026, 10, 3))
    _add(db, "expense", "fuel", 100, date(2026, 10, 25))

    summary = service.dashboard_summary(db, 1, today=today, years=2)

    assert summary["current_month"]["expense"] == 40.0
    assert summary["last_12_months"][-1]["expense"] == summary["current_month"]["expense"]
    assert summary["current_month_by_category"]["expense"] == {"seeds": 40.0}
    assert summary["current_year"]["expense"] == 40.0
    assert summary["last_years"][-1]["expense"] == 40.0
