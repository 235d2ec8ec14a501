"""
Public fee lookup by guardian mobile number.

Runs without an owner: callers are unauthenticated guardians, so the query
uses the service session and returns a narrow projection. Only
the student's id, name and class and each fee's month, year, amount and
status leave this module; payment methods, transaction ids, owner ids and fee
ids never do.
"""
import logging
import re

from feeledger.database import store_call
from feeledger.errors import ValidationError
from feeledger.models.fees import FeeRecord
from feeledger.models.students import Student

logger = logging.getLogger(__name__)

MIN_MOBILE_LENGTH = 10
NON_DIGITS = re.compile(r"\D")


def clean_mobile(raw_mobile):
    """Digits of a guardian's mobile number, or ValidationError when too short."""
    if not isinstance(raw_mobile, str) or len(raw_mobile.strip()) < MIN_MOBILE_LENGTH:
        raise ValidationError("Invalid mobile number")
    cleaned = NON_DIGITS.sub("", raw_mobile)
    if len(cleaned) < MIN_MOBILE_LENGTH:
        raise ValidationError("Invalid mobile number")
    return cleaned


def lookup_students(db, raw_mobile):
    mobile = clean_mobile(raw_mobile)
    logger.info("Fee check for mobile ending %s", mobile[-4:])

    with store_call(db, "Fee check: fetch students"):
        students = db.query(Student.id, Student.name, Student.class_name.label("class_name")).filter(
            Student.mobile == mobile
        ).order_by(Student.id).all()

    if not students:
        logger.info("Fee check: no students found")
        return []

    student_ids = [s.id for s in students]
    with store_call(db, "Fee check: fetch fee records"):
        fees = db.query(
            FeeRecord.student_id, FeeRecord.month, FeeRecord.year, FeeRecord.amount, FeeRecord.status
        ).filter(
            FeeRecord.student_id.in_(student_ids)
        ).order_by(
            FeeRecord.year.desc(), FeeRecord.created_at.desc(), FeeRecord.id.desc()
        ).all()

    fees_by_student = {student_id: [] for student_id in student_ids}
    for f in fees:
        fees_by_student[f.student_id].append({
            "month": f.month,
            "year": f.year,
            "amount": f.amount,
            "status": f.status,
        })

    result = [
        {
            "id": s.id,
            "name": s.name,
            "class": s.class_name,
            "fees": fees_by_student[s.id],
        }
        for s in students
    ]
    logger.info("Fee check: returning %s students", len(result))
    return result
