"""
Student records.

Saving a student with a photo is two remote calls: the upload, then the row
write. If the row write fails the uploaded image is deleted again so no
orphaned objects are left in the image store.
"""
import datetime
import logging
import re
from dataclasses import dataclass
from typing import Optional

from feeledger.database import store_call
from feeledger.errors import ValidationError, PersistenceError
from feeledger.models.fees import FeeRecord
from feeledger.models.students import Student
from feeledger.services.calendar import CLASS_OPTIONS
from feeledger.services.ledger import validate_amount
from feeledger.storage import validate_image

logger = logging.getLogger(__name__)


@dataclass
class StudentData:
    name: str
    class_name: str
    father_name: str
    mobile: str
    admission_date: Optional[datetime.date] = None
    monthly_fee_amount: int = 500


# Column sizes of the students table
MAX_NAME_LENGTH = 100
MAX_MOBILE_DIGITS = 15


def normalize_mobile(mobile):
    digits = re.sub(r"\D", "", mobile or "")
    if len(digits) < 10:
        raise ValidationError("Mobile number must have at least 10 digits")
    if len(digits) > MAX_MOBILE_DIGITS:
        raise ValidationError(f"Mobile number can have at most {MAX_MOBILE_DIGITS} digits")
    return digits


def clean_student_data(data: StudentData) -> StudentData:
    name = (data.name or "").strip()
    father_name = (data.father_name or "").strip()
    if not name:
        raise ValidationError("Student name is required")
    if not father_name:
        raise ValidationError("Father's name is required")
    if len(name) > MAX_NAME_LENGTH or len(father_name) > MAX_NAME_LENGTH:
        raise ValidationError(f"Names can be at most {MAX_NAME_LENGTH} characters")
    if data.class_name not in CLASS_OPTIONS:
        raise ValidationError("Unknown class: %s" % data.class_name)
    validate_amount(data.monthly_fee_amount)

    return StudentData(
        name=name,
        class_name=data.class_name,
        father_name=father_name,
        mobile=normalize_mobile(data.mobile),
        admission_date=data.admission_date or datetime.date.today(),
        monthly_fee_amount=data.monthly_fee_amount,
    )


def _discard_upload(store, public_id):
    try:
        store.delete(public_id)
    except PersistenceError:
        logger.error("Orphaned profile image left in store: %s", public_id)


# =====================
# READS
# =====================

def get_student(db, owner_id, student_id) -> Optional[Student]:
    with store_call(db, "Fetch student"):
        return db.query(Student).filter(
            Student.id == student_id,
            Student.owner_id == owner_id
        ).first()


def list_students(db, owner_id):
    with store_call(db, "Fetch students"):
        return db.query(Student).filter(Student.owner_id == owner_id).order_by(Student.id).all()


def count_students(db, owner_id):
    with store_call(db, "Count students"):
        return db.query(Student).filter(Student.owner_id == owner_id).count()


# =====================
# WRITES
# =====================

def create_student(db, owner_id, data: StudentData, image=None, store=None) -> Student:
    data = clean_student_data(data)
    if image is not None:
        validate_image(image)

    stored = store.store(image) if image is not None else None

    student = Student(
        owner_id=owner_id,
        name=data.name,
        class_name=data.class_name,
        father_name=data.father_name,
        mobile=data.mobile,
        admission_date=data.admission_date,
        monthly_fee_amount=data.monthly_fee_amount,
        profile_image=stored.url if stored else None,
        profile_image_id=stored.public_id if stored else None,
    )
    try:
        with store_call(db, "Create student"):
            db.add(student)
            db.commit()
            db.refresh(student)
    except PersistenceError:
        if stored:
            _discard_upload(store, stored.public_id)
        raise

    logger.info("Student %s created", student.id)
    return student


def update_student(db, owner_id, student_id, data: StudentData, image=None, store=None) -> Optional[Student]:
    data = clean_student_data(data)
    if image is not None:
        validate_image(image)

    student = get_student(db, owner_id, student_id)
    if student is None:
        return None

    stored = store.store(image) if image is not None else None
    old_image_id = student.profile_image_id

    try:
        with store_call(db, "Update student"):
            student.name = data.name
            student.class_name = data.class_name
            student.father_name = data.father_name
            student.mobile = data.mobile
            student.admission_date = data.admission_date
            student.monthly_fee_amount = data.monthly_fee_amount
            if stored:
                student.profile_image = stored.url
                student.profile_image_id = stored.public_id
            db.commit()
            db.refresh(student)
    except PersistenceError:
        if stored:
            _discard_upload(store, stored.public_id)
        raise

    if stored and old_image_id:
        _discard_upload(store, old_image_id)

    logger.info("Student %s updated", student.id)
    return student


def delete_student(db, owner_id, student_id, store=None) -> bool:
    """Delete a student and every fee record of that student."""
    student = get_student(db, owner_id, student_id)
    if student is None:
        return False

    image_id = student.profile_image_id
    with store_call(db, "Delete student"):
        removed = db.query(FeeRecord).filter(
            FeeRecord.student_id == student.id
        ).delete(synchronize_session=False)
        db.delete(student)
        db.commit()

    logger.info("Student %s deleted with %s fee records", student_id, removed)
    if image_id and store is not None:
        _discard_upload(store, image_id)
    return True
