"""
Fee record status machine and ad-hoc fee entry.

unpaid -> paid is the only transition offered by the payment flow. The ad-hoc
fee editor may set any field, including re-opening a paid fee, and every write
re-establishes the record rules:

    status == paid  <=>  paid_at is set  <=>  payment_method is set
    transaction_id is set only for qr payments
"""
import datetime
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from feeledger.database import store_call
from feeledger.errors import ValidationError, DuplicateFeeError
from feeledger.models.fees import FeeRecord, PAID, UNPAID, FEE_STATUSES, QR, MANUAL, PAYMENT_METHODS
from feeledger.models.students import Student
from feeledger.services.calendar import MONTH_NUMBERS

logger = logging.getLogger(__name__)

MIN_YEAR = 2000
MAX_YEAR = 2100


def _now():
    return datetime.datetime.now(datetime.timezone.utc)


# =====================
# VALIDATION
# =====================

def validate_month(month):
    if month not in MONTH_NUMBERS:
        raise ValidationError("Month must be between 1 and 12")
    return month


def validate_year(year):
    if not isinstance(year, int) or not MIN_YEAR <= year <= MAX_YEAR:
        raise ValidationError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}")
    return year


def validate_amount(amount):
    if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
        raise ValidationError("Fee amount must be a positive whole number")
    return amount


def validate_payment(payment_method, transaction_id=None):
    """Return the cleaned transaction id for a payment, or raise ValidationError."""
    if payment_method not in PAYMENT_METHODS:
        raise ValidationError("Payment method must be one of: " + ", ".join(PAYMENT_METHODS))
    if payment_method != QR:
        return None
    cleaned = (transaction_id or "").strip()
    if not cleaned:
        raise ValidationError("Transaction ID is required for QR payments")
    return cleaned


def _apply_status(fee, status, payment_method=None, transaction_id=None, paid_at=None):
    if status not in FEE_STATUSES:
        raise ValidationError("Status must be 'paid' or 'unpaid'")

    if status == UNPAID:
        fee.status = UNPAID
        fee.payment_method = None
        fee.transaction_id = None
        fee.paid_at = None
        return fee

    method = payment_method or fee.payment_method or MANUAL
    txn = transaction_id if transaction_id is not None else fee.transaction_id
    fee.transaction_id = validate_payment(method, txn)
    fee.status = PAID
    fee.payment_method = method
    fee.paid_at = paid_at or fee.paid_at or _now()
    return fee


# =====================
# READS
# =====================

def get_fee(db, owner_id, fee_id) -> Optional[FeeRecord]:
    with store_call(db, "Fetch fee record"):
        return db.query(FeeRecord).filter(
            FeeRecord.id == fee_id,
            FeeRecord.owner_id == owner_id
        ).first()


def list_fees(db, owner_id, student_id=None, year=None, month=None):
    """Owner's fee records in insertion order, optionally narrowed."""
    with store_call(db, "Fetch fee records"):
        query = db.query(FeeRecord).filter(FeeRecord.owner_id == owner_id)
        if student_id is not None:
            query = query.filter(FeeRecord.student_id == student_id)
        if year is not None:
            query = query.filter(FeeRecord.year == year)
        if month is not None:
            query = query.filter(FeeRecord.month == month)
        return query.order_by(FeeRecord.id).all()


# =====================
# STATUS TRANSITION
# =====================

def mark_paid(db, owner_id, fee_id, payment_method, transaction_id=None) -> Optional[FeeRecord]:
    """
    Confirm payment of an unpaid fee.

    Validation runs before any store call. Returns None when the fee does not
    belong to the owner.
    """
    cleaned_txn = validate_payment(payment_method, transaction_id)

    fee = get_fee(db, owner_id, fee_id)
    if fee is None:
        return None
    if fee.status == PAID:
        raise ValidationError("Fee is already paid")

    with store_call(db, "Mark fee paid"):
        fee.status = PAID
        fee.payment_method = payment_method
        fee.transaction_id = cleaned_txn
        fee.paid_at = _now()
        db.commit()
        db.refresh(fee)

    logger.info("Fee %s marked paid via %s", fee.id, payment_method)
    return fee


# =====================
# AD-HOC FEE ENTRY
# =====================

def _paid_at_from_date(paid_on):
    if paid_on is None:
        return None
    return datetime.datetime.combine(paid_on, datetime.time.min, tzinfo=datetime.timezone.utc)


def _save(db, fee, action):
    with store_call(db, action):
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise DuplicateFeeError() from e
        db.refresh(fee)
    return fee


def create_fee(db, owner_id, student_id, month, year, amount,
               status=UNPAID, payment_method=None, transaction_id=None, paid_on=None) -> Optional[FeeRecord]:
    """Single fee entry from the admin fee form. Returns None for an unknown student."""
    validate_month(month)
    validate_year(year)
    validate_amount(amount)

    with store_call(db, "Fetch student"):
        student = db.query(Student).filter(
            Student.id == student_id,
            Student.owner_id == owner_id
        ).first()
    if student is None:
        return None

    fee = FeeRecord(owner_id=owner_id, student_id=student.id, month=month, year=year, amount=amount)
    _apply_status(fee, status, payment_method, transaction_id, _paid_at_from_date(paid_on))

    db.add(fee)
    _save(db, fee, "Create fee record")
    logger.info("Fee %s/%s created for student %s", month, year, student_id)
    return fee


def update_fee(db, owner_id, fee_id, month, year, amount,
               status, payment_method=None, transaction_id=None, paid_on=None) -> Optional[FeeRecord]:
    """
    Ad-hoc editor: overwrite every field of a fee.

    Setting status back to unpaid re-opens a paid fee and clears its payment
    details.
    """
    validate_month(month)
    validate_year(year)
    validate_amount(amount)
    if status not in FEE_STATUSES:
        raise ValidationError("Status must be 'paid' or 'unpaid'")

    fee = get_fee(db, owner_id, fee_id)
    if fee is None:
        return None

    # Validate the full new state on a detached copy before touching the record
    draft = FeeRecord(
        payment_method=fee.payment_method,
        transaction_id=fee.transaction_id,
        paid_at=fee.paid_at,
    )
    _apply_status(draft, status, payment_method, transaction_id, _paid_at_from_date(paid_on))

    fee.month = month
    fee.year = year
    fee.amount = amount
    fee.status = draft.status
    fee.payment_method = draft.payment_method
    fee.transaction_id = draft.transaction_id
    fee.paid_at = draft.paid_at

    _save(db, fee, "Update fee record")
    logger.info("Fee %s updated (%s)", fee.id, fee.status)
    return fee
