"""
Fee generation: create the missing monthly fee records of a student for a year.

Generation only ever inserts. Months that already have a record (paid or not)
are left untouched, and the store's unique (student, month, year) constraint
decides the winner when two generations for the same year overlap.
"""
import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError

from feeledger.database import store_call
from feeledger.models.fees import FeeRecord, UNPAID
from feeledger.services.calendar import MONTH_NUMBERS
from feeledger.services.ledger import validate_year

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    year: int
    created: int

    @property
    def noop(self):
        """True when every month already existed and nothing was written."""
        return self.created == 0


def existing_months(db, student_id, year):
    with store_call(db, "Fetch generated months"):
        rows = db.query(FeeRecord.month).filter(
            FeeRecord.student_id == student_id,
            FeeRecord.year == year
        ).all()
    return {row.month for row in rows}


def insert_fee_months(db, owner_id, student_id, amount, year, months):
    """
    Insert unpaid fee records for the given months and return how many were
    written. Months rejected by the uniqueness constraint are skipped.
    """
    def new_record(month):
        return FeeRecord(
            owner_id=owner_id,
            student_id=student_id,
            month=month,
            year=year,
            amount=amount,
            status=UNPAID,
            payment_method=None,
            transaction_id=None,
            paid_at=None,
        )

    if not months:
        return 0

    with store_call(db, "Generate fees"):
        try:
            db.add_all([new_record(month) for month in months])
            db.commit()
            return len(months)
        except IntegrityError:
            db.rollback()
            logger.warning(
                "Concurrent generation detected for student %s, year %s; inserting month by month",
                student_id, year,
            )

        created = 0
        for month in months:
            db.add(new_record(month))
            try:
                db.commit()
                created += 1
            except IntegrityError:
                db.rollback()
        return created


def generate_fees(db, owner_id, student, year) -> GenerationResult:
    """Create the fee records missing for ``year``; safe to call repeatedly."""
    validate_year(year)

    # Plain values: the student instance expires on rollback
    student_id = student.id
    amount = student.monthly_fee_amount

    missing = [m for m in MONTH_NUMBERS if m not in existing_months(db, student_id, year)]
    if not missing:
        logger.info("All fees for student %s in %s already exist", student_id, year)
        return GenerationResult(year=year, created=0)

    created = insert_fee_months(db, owner_id, student_id, amount, year, missing)
    logger.info("Generated %s fee records for student %s in %s", created, student_id, year)
    return GenerationResult(year=year, created=created)
