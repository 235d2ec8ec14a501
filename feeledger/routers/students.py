from datetime import date as dt_date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Form, File, UploadFile
from sqlalchemy.orm import Session

from feeledger.config import settings
from feeledger.database import get_db
from feeledger.schemas.students import StudentOut, StudentListItem
from feeledger.security import get_owner_id
from feeledger.services import students as student_service
from feeledger.services.aggregation import filter_students, filter_by_latest_status, latest_fees
from feeledger.services.ledger import list_fees
from feeledger.services.students import StudentData
from feeledger.storage import ImageUpload, get_image_store

router = APIRouter(prefix="/api/v1/students", tags=["Students"])


async def _read_image(upload: Optional[UploadFile]) -> Optional[ImageUpload]:
    # Browsers post an empty part when no file was picked
    if upload is None or not upload.filename:
        return None
    data = await upload.read()
    return ImageUpload(data=data, content_type=upload.content_type or "", filename=upload.filename)


# ===============================
#   1. LIST / FILTER
# ===============================

@router.get("", response_model=List[StudentListItem])
def get_students(
    search: str = "",
    class_name: str = "all",
    status: str = "all",
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Students filtered by name, class and latest fee status."""
    students = filter_students(student_service.list_students(db, owner_id), search, class_name)
    fees = list_fees(db, owner_id)
    ordering = settings.LATEST_FEE_ORDERING
    students = filter_by_latest_status(students, fees, status, ordering)
    latest = latest_fees(fees, ordering)

    result = []
    for s in students:
        item = StudentListItem.model_validate(s)
        item.latest_fee_status = latest[s.id].status if s.id in latest else None
        result.append(item)
    return result


# ===============================
#   2. STUDENT CRUD OPERATIONS
# ===============================

@router.post("", response_model=StudentOut, status_code=201)
async def add_student(
    name: str = Form(...),
    class_name: str = Form(...),
    father_name: str = Form(...),
    mobile: str = Form(...),
    admission_date: Optional[dt_date] = Form(None),
    monthly_fee_amount: int = Form(500),
    profile_image: Optional[UploadFile] = File(None),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
    store=Depends(get_image_store),
):
    data = StudentData(
        name=name,
        class_name=class_name,
        father_name=father_name,
        mobile=mobile,
        admission_date=admission_date,
        monthly_fee_amount=monthly_fee_amount,
    )
    image = await _read_image(profile_image)
    return student_service.create_student(db, owner_id, data, image=image, store=store)


@router.get("/{id}", response_model=StudentOut)
def get_student_detail(id: int, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_db)):
    student = student_service.get_student(db, owner_id, id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return student


@router.post("/{id}/update", response_model=StudentOut)
async def update_student_details(
    id: int,
    name: str = Form(...),
    class_name: str = Form(...),
    father_name: str = Form(...),
    mobile: str = Form(...),
    admission_date: Optional[dt_date] = Form(None),
    monthly_fee_amount: int = Form(...),
    profile_image: Optional[UploadFile] = File(None),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
    store=Depends(get_image_store),
):
    data = StudentData(
        name=name,
        class_name=class_name,
        father_name=father_name,
        mobile=mobile,
        admission_date=admission_date,
        monthly_fee_amount=monthly_fee_amount,
    )
    image = await _read_image(profile_image)
    student = student_service.update_student(db, owner_id, id, data, image=image, store=store)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return student


@router.delete("/{id}")
def delete_student(
    id: int,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
    store=Depends(get_image_store),
):
    """Deletes the student together with all of the student's fee records."""
    if not student_service.delete_student(db, owner_id, id, store=store):
        raise HTTPException(status_code=404, detail="Student not found")
    return {"message": "Deleted"}
