"""
Expense/earning records and the dashboard summary.

Every record stores ``year`` and ``month`` derived from its ``date`` so the
dashboard windows group on plain integer columns.
"""
import math
from datetime import date, timedelta
from typing import Any, Iterable, Optional

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from agrosphere.core.config import DASHBOARD_RECENT_LIMIT, DASHBOARD_YEARS
from agrosphere.core.errors import NotFoundError, ValidationError
from agrosphere.modules.users.service import get_user
from agrosphere.schemas.enums import CATEGORIES_BY_TYPE, RecordType
from .models import FinanceRecord


# ---------- VALIDATION ----------

def _validate_type(value: Optional[str]) -> RecordType:
    try:
        return RecordType((value or "").strip().lower())
    except ValueError:
        raise ValidationError("type must be 'expense' or 'earning'")


def _validate_category(record_type: RecordType, value: Optional[str]) -> str:
    category = (value or "").strip().lower()
    if not category:
        raise ValidationError("category is required")
    if category not in CATEGORIES_BY_TYPE[record_type]:
        raise ValidationError(f"invalid category '{category}' for {record_type.value}")
    return category


def _validate_amount(value: Any) -> float:
    if isinstance(value, bool):
        raise ValidationError("amount must be a number")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError("amount must be a number")

    if not math.isfinite(amount):
        raise ValidationError("amount must be a finite number")
    if amount <= 0:
        raise ValidationError("amount must be positive")
    return amount


def _validate_date(value: Any) -> date:
    if value is None or value == "":
        raise ValidationError("date is required")
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError("date must be an ISO date (YYYY-MM-DD)")


# ---------- RECORDS ----------

def create_record(
    db: Session,
    user_id: int,
    type: Optional[str],
    category: Optional[str],
    amount: Any,
    description: Optional[str],
    date: Any,
) -> FinanceRecord:
    record_type = _validate_type(type)
    category = _validate_category(record_type, category)
    amount = _validate_amount(amount)
    when = _validate_date(date)

    get_user(db, user_id)

    record = FinanceRecord(
        user_id=user_id,
        type=record_type.value,
        category=category,
        amount=amount,
        description=(description or "").strip(),
        date=when,
        year=when.year,
        month=when.month,
    )
    db.add(record)
    db.commit()
    db.refresh(record)

    logger.info(f"Finance record created | user={user_id} id={record.id} type={record.type} amount={amount}")
    return record


def list_records(
    db: Session,
    user_id: int,
    year: Optional[int] = None,
    month: Optional[int] = None,
    type: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
):
    stmt = select(FinanceRecord).where(FinanceRecord.user_id == user_id)
    if year is not None:
        stmt = stmt.where(FinanceRecord.year == year)
    if month is not None:
        stmt = stmt.where(FinanceRecord.month == month)
    if type:
        stmt = stmt.where(FinanceRecord.type == _validate_type(type).value)

    stmt = stmt.order_by(FinanceRecord.date.desc(), FinanceRecord.id.desc()).limit(limit).offset(offset)
    return db.scalars(stmt).all()


def delete_record(db: Session, user_id: int, record_id: int) -> None:
    record = db.get(FinanceRecord, record_id)
    if not record or record.user_id != user_id:
        raise NotFoundError("Record not found")

    db.delete(record)
    db.commit()
    logger.info(f"Finance record deleted | user={user_id} id={record_id}")


# ---------- DASHBOARD ----------

def trailing_months(today: date, count: int = 12) -> list[tuple[int, int]]:
    """(year, month) pairs ending with today's month, oldest first."""
    index = today.year * 12 + (today.month - 1)
    return [(i // 12, i % 12 + 1) for i in range(index - count + 1, index + 1)]


def _zero_totals() -> dict:
    return {RecordType.expense.value: 0.0, RecordType.earning.value: 0.0}


def _type_totals(rows: Iterable) -> dict:
    totals = _zero_totals()
    for record_type, total in rows:
        totals[record_type] = round(float(total or 0), 2)
    return totals


def _sum_by_type(db: Session, user_id: int, *conditions) -> dict:
    rows = db.execute(
        select(FinanceRecord.type, func.sum(FinanceRecord.amount))
        .where(FinanceRecord.user_id == user_id, *conditions)
        .group_by(FinanceRecord.type)
    ).all()
    return _type_totals(rows)


def dashboard_summary(
    db: Session,
    user_id: int,
    today: Optional[date] = None,
    years: int = DASHBOARD_YEARS,
    recent: int = DASHBOARD_RECENT_LIMIT,
) -> dict:
    today = today or date.today()
    years = max(1, years)
    get_user(db, user_id)

    # every window ends at today; later-dated records are left out
    current_month = _sum_by_type(
        db,
        user_id,
        FinanceRecord.year == today.year,
        FinanceRecord.month == today.month,
        FinanceRecord.date <= today,
    )
    last_7_days = _sum_by_type(
        db, user_id, FinanceRecord.date >= today - timedelta(days=6), FinanceRecord.date <= today
    )
    current_year = _sum_by_type(
        db, user_id, FinanceRecord.year == today.year, FinanceRecord.date <= today
    )

    # --- current month by category ---
    by_category = {RecordType.expense.value: {}, RecordType.earning.value: {}}
    rows = db.execute(
        select(FinanceRecord.type, FinanceRecord.category, func.sum(FinanceRecord.amount))
        .where(
            FinanceRecord.user_id == user_id,
            FinanceRecord.year == today.year,
            FinanceRecord.month == today.month,
            FinanceRecord.date <= today,
        )
        .group_by(FinanceRecord.type, FinanceRecord.category)
    ).all()
    for record_type, category, total in rows:
        by_category[record_type][category] = round(float(total or 0), 2)

    # --- trailing 12 months ---
    months = trailing_months(today, 12)
    first_year, first_month = months[0]
    month_totals = {ym: _zero_totals() for ym in months}
    rows = db.execute(
        select(FinanceRecord.year, FinanceRecord.month, FinanceRecord.type, func.sum(FinanceRecord.amount))
        .where(
            FinanceRecord.user_id == user_id,
            FinanceRecord.date >= date(first_year, first_month, 1),
            FinanceRecord.date <= today,
        )
        .group_by(FinanceRecord.year, FinanceRecord.month, FinanceRecord.type)
    ).all()
    for year, month, record_type, total in rows:
        month_totals[(year, month)][record_type] = round(float(total or 0), 2)

    # --- trailing N years ---
    year_range = list(range(today.year - years + 1, today.year + 1))
    year_totals = {y: _zero_totals() for y in year_range}
    rows = db.execute(
        select(FinanceRecord.year, FinanceRecord.type, func.sum(FinanceRecord.amount))
        .where(
            FinanceRecord.user_id == user_id,
            FinanceRecord.year >= year_range[0],
            FinanceRecord.date <= today,
        )
        .group_by(FinanceRecord.year, FinanceRecord.type)
    ).all()
    for year, record_type, total in rows:
        year_totals[year][record_type] = round(float(total or 0), 2)

    recent_records = db.scalars(
        select(FinanceRecord)
        .where(FinanceRecord.user_id == user_id)
        .order_by(FinanceRecord.date.desc(), FinanceRecord.id.desc())
        .limit(recent)
    ).all()

    available_years = list(
        db.scalars(
            select(FinanceRecord.year)
            .where(FinanceRecord.user_id == user_id)
            .distinct()
            .order_by(FinanceRecord.year.desc())
        )
    )

    return {
        "current_month": current_month,
        "current_month_by_category": by_category,
        "last_7_days": last_7_days,
        "last_12_months": [
            {"year": y, "month": m, **month_totals[(y, m)]} for y, m in months
        ],
        "last_years": [{"year": y, **year_totals[y]} for y in year_range],
        "current_year": current_year,
        "recent_transactions": recent_records,
        "available_years": available_years,
    }
