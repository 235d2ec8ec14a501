"""Seed demo students and this year's fee ledger for the configured admin."""
import datetime
import logging

from feeledger.config import settings
from feeledger.database import SessionLocal, init_db
from feeledger.models.students import Student
from feeledger.services.generation import generate_fees
from feeledger.services.ledger import list_fees, mark_paid
from feeledger.services.students import StudentData, create_student

logger = logging.getLogger(__name__)

DEMO_STUDENTS = [
    StudentData(name="Aarav Sharma", class_name="class3", father_name="Rakesh Sharma",
                mobile="9876543210", monthly_fee_amount=700),
    StudentData(name="Anaya Sharma", class_name="ukg", father_name="Rakesh Sharma",
                mobile="9876543210", monthly_fee_amount=500),
    StudentData(name="Vihaan Gupta", class_name="class7", father_name="Sunil Gupta",
                mobile="9123456780", monthly_fee_amount=900),
]


def seed_data(db, owner_id, year=None, paid_months=3):
    """Create the demo students (once) and generate their fees for ``year``."""
    year = year or datetime.date.today().year
    created = 0

    for data in DEMO_STUDENTS:
        student = db.query(Student).filter_by(owner_id=owner_id, name=data.name).first()
        if not student:
            student = create_student(db, owner_id, data)
            created += 1
            logger.info("Added student: %s", student.name)
        else:
            logger.info("Exists: %s", student.name)

        generate_fees(db, owner_id, student, year)

        # First months of the year already paid in cash
        for fee in list_fees(db, owner_id, student_id=student.id, year=year):
            if fee.month <= paid_months and fee.status == "unpaid":
                mark_paid(db, owner_id, fee.id, "cash")

    return created


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    init_db()
    session = SessionLocal()
    try:
        seed_data(session, settings.ADMIN_EMAIL.lower())
    finally:
        session.close()
