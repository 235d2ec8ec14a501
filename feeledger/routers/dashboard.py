from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from feeledger.database import get_db
from feeledger.schemas.fees import DashboardOut
from feeledger.security import get_owner_id
from feeledger.services.aggregation import monthly_totals
from feeledger.services.ledger import list_fees, validate_month, validate_year
from feeledger.services.students import count_students

router = APIRouter(prefix="/api/v1/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardOut)
def dashboard_view(
    month: Optional[int] = None,
    year: Optional[int] = None,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Student count plus collected / pending fees of one month (default: this month)"""
    today = date.today()
    month = validate_month(month if month is not None else today.month)
    year = validate_year(year if year is not None else today.year)

    totals = monthly_totals(list_fees(db, owner_id, month=month, year=year), month, year)
    return {
        "total_students": count_students(db, owner_id),
        "month": month,
        "year": year,
        "fees_collected": totals.collected,
        "pending_fees": totals.pending,
    }
