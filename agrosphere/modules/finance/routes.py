from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from agrosphere.core.auth import get_current_user_id
from agrosphere.core.config import DASHBOARD_RECENT_LIMIT, DASHBOARD_YEARS
from agrosphere.core.db import get_db
from agrosphere.schemas.finance import DashboardOut, RecordCreateIn, RecordOut
from .service import create_record, dashboard_summary, delete_record, list_records

router = APIRouter(prefix="/finance", tags=["finance"])


@router.post("/records", response_model=RecordOut, status_code=201)
def record_create(
    payload: RecordCreateIn,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return create_record(
        db,
        user_id,
        type=payload.type,
        category=payload.category,
        amount=payload.amount,
        description=payload.description,
        date=payload.date,
    )


@router.get("/records", response_model=List[RecordOut])
def record_list(
    year: Optional[int] = None,
    month: Optional[int] = Query(None, ge=1, le=12),
    type: Optional[str] = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return list_records(db, user_id, year=year, month=month, type=type, limit=limit, offset=offset)


@router.delete("/records/{record_id}", status_code=204)
def record_delete(
    record_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    delete_record(db, user_id, record_id)
    return Response(status_code=204)


@router.get("/dashboard", response_model=DashboardOut)
def dashboard(
    years: int = Query(DASHBOARD_YEARS, ge=1, le=20),
    recent: int = Query(DASHBOARD_RECENT_LIMIT, ge=1, le=100),
    today: Optional[date] = None,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return dashboard_summary(db, user_id, today=today, years=years, recent=recent)
