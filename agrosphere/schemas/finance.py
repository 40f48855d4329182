from datetime import date as date_type, datetime
from typing import Dict, List, Optional
from pydantic import BaseModel

from agrosphere.schemas.base import BaseSchema


class RecordCreateIn(BaseModel):
    # domain checks live in the service; only shapes are enforced here
    type: str
    category: str
    amount: float
    description: str = ""
    date: Optional[date_type] = None


class RecordOut(BaseSchema):
    id: int
    type: str
    category: str
    amount: float
    description: str
    date: date_type
    year: int
    month: int
    created_at: datetime


class TypeTotals(BaseModel):
    expense: float = 0.0
    earning: float = 0.0


class MonthTotals(TypeTotals):
    year: int
    month: int


class YearTotals(TypeTotals):
    year: int


class DashboardOut(BaseModel):
    current_month: TypeTotals
    current_month_by_category: Dict[str, Dict[str, float]]
    last_7_days: TypeTotals
    last_12_months: List[MonthTotals]
    last_years: List[YearTotals]
    current_year: TypeTotals
    recent_transactions: List[RecordOut]
    available_years: List[int]
