"""
Fee Ledger Router - monthly fee records per student
Generation, payments, ad-hoc entry and the per-year fee view
"""
import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from feeledger.config import settings
from feeledger.database import get_db
from feeledger.models.fees import FEE_STATUSES, PAYMENT_METHODS
from feeledger.schemas.fees import (
    GenerateRequest, GenerateResult, FeeCreate, FeeUpdate, PaymentRequest,
    FeeRecordOut, StudentFeesOut, PaymentLinkOut, FeeOptionsOut,
)
from feeledger.security import get_owner_id
from feeledger.services import ledger
from feeledger.services.aggregation import summarize, month_grid
from feeledger.services.calendar import MONTHS, CLASS_OPTIONS, fee_year_window
from feeledger.services.generation import generate_fees
from feeledger.services.payments import build_payment_link
from feeledger.services.students import get_student

router = APIRouter(prefix="/api/v1/fees", tags=["Fee Ledger"])


def _student_or_404(db, owner_id, student_id):
    student = get_student(db, owner_id, student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return student


def _fee_or_404(fee):
    if fee is None:
        raise HTTPException(status_code=404, detail="Fee record not found")
    return fee


# =====================
# OPTIONS
# =====================

@router.get("/options", response_model=FeeOptionsOut)
def get_fee_options():
    """Months, selectable years and class roster for the fee forms"""
    return {
        "months": [{"value": number, "key": name} for number, name in MONTHS],
        "years": fee_year_window(),
        "classes": CLASS_OPTIONS,
        "payment_methods": list(PAYMENT_METHODS),
        "statuses": list(FEE_STATUSES),
    }


# =====================
# STUDENT FEE VIEW
# =====================

@router.get("/student/{student_id}", response_model=StudentFeesOut)
def get_student_fees(
    student_id: int,
    year: Optional[int] = None,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Fee records of one student for a year, with month grid and totals"""
    _student_or_404(db, owner_id, student_id)
    year = ledger.validate_year(year if year is not None else datetime.date.today().year)

    fees = sorted(ledger.list_fees(db, owner_id, student_id=student_id, year=year), key=lambda f: f.month)
    return {
        "student_id": student_id,
        "year": year,
        "fees": fees,
        "grid": [
            {"month": number, "month_name": name, "fee": fee}
            for number, name, fee in month_grid(fees)
        ],
        "summary": summarize(fees),
    }


@router.post("/student/{student_id}/generate", response_model=GenerateResult)
def generate_student_fees(
    student_id: int,
    req: GenerateRequest,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Create the missing monthly fees of the year (never touches existing ones)"""
    student = _student_or_404(db, owner_id, student_id)
    result = generate_fees(db, owner_id, student, req.year)

    if result.noop:
        return {
            "year": result.year,
            "created": 0,
            "status": "info",
            "message": f"All fees for {result.year} already exist",
        }
    return {
        "year": result.year,
        "created": result.created,
        "status": "success",
        "message": f"{result.created} fee records generated",
    }


# =====================
# AD-HOC FEE ENTRY
# =====================

@router.post("", response_model=FeeRecordOut, status_code=201)
def create_fee(data: FeeCreate, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_db)):
    fee = ledger.create_fee(
        db, owner_id,
        student_id=data.student_id,
        month=data.month,
        year=data.year,
        amount=data.amount,
        status=data.status,
        payment_method=data.payment_method,
        transaction_id=data.transaction_id,
        paid_on=data.paid_on,
    )
    if fee is None:
        raise HTTPException(status_code=404, detail="Student not found")
    return fee


@router.put("/{fee_id}", response_model=FeeRecordOut)
def update_fee(fee_id: int, data: FeeUpdate, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_db)):
    """Edit every field of a fee; status 'unpaid' re-opens a paid fee"""
    fee = ledger.update_fee(
        db, owner_id, fee_id,
        month=data.month,
        year=data.year,
        amount=data.amount,
        status=data.status,
        payment_method=data.payment_method,
        transaction_id=data.transaction_id,
        paid_on=data.paid_on,
    )
    return _fee_or_404(fee)


# =====================
# PAYMENTS
# =====================

@router.post("/{fee_id}/pay", response_model=FeeRecordOut)
def pay_fee(fee_id: int, pay: PaymentRequest, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_db)):
    fee = ledger.mark_paid(db, owner_id, fee_id, pay.payment_method, pay.transaction_id)
    return _fee_or_404(fee)


@router.get("/{fee_id}/payment-link", response_model=PaymentLinkOut)
def get_payment_link(fee_id: int, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_db)):
    """UPI deep link + QR code for paying one month"""
    fee = _fee_or_404(ledger.get_fee(db, owner_id, fee_id))
    student = _student_or_404(db, owner_id, fee.student_id)
    return build_payment_link(student, fee, settings.UPI_ID, settings.PAYEE_NAME)
