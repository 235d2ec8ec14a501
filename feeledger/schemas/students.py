from datetime import date
from typing import Optional

from pydantic import BaseModel


class StudentOut(BaseModel):
    id: int
    name: str
    class_name: str
    father_name: str
    mobile: str
    admission_date: Optional[date]
    profile_image: Optional[str] = None
    monthly_fee_amount: int

    class Config:
        from_attributes = True


# List row: student plus the status of the latest fee record
class StudentListItem(StudentOut):
    latest_fee_status: Optional[str] = None
