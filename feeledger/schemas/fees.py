from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel


# --- INPUT ---
class GenerateRequest(BaseModel):
    year: int


class FeeCreate(BaseModel):
    student_id: int
    month: int
    year: int
    amount: int = 500
    status: str = "unpaid"
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    paid_on: Optional[date] = None


class FeeUpdate(BaseModel):
    month: int
    year: int
    amount: int
    status: str
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    paid_on: Optional[date] = None


class PaymentRequest(BaseModel):
    payment_method: str
    transaction_id: Optional[str] = None


# --- OUTPUT ---
class FeeRecordOut(BaseModel):
    id: int
    student_id: int
    month: int
    year: int
    amount: int
    status: str
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    paid_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FeeSummaryOut(BaseModel):
    paid_count: int
    unpaid_count: int
    total_paid: int
    total_pending: int

    class Config:
        from_attributes = True


class MonthSlot(BaseModel):
    month: int
    month_name: str
    fee: Optional[FeeRecordOut] = None


class StudentFeesOut(BaseModel):
    student_id: int
    year: int
    fees: List[FeeRecordOut]
    grid: List[MonthSlot]
    summary: FeeSummaryOut


class GenerateResult(BaseModel):
    year: int
    created: int
    status: str  # "success" or "info" when nothing was missing
    message: str


class PaymentLinkOut(BaseModel):
    upi_link: str
    qr_code_url: str
    description: str
    amount: int

    class Config:
        from_attributes = True


class MonthOption(BaseModel):
    value: int
    key: str


class FeeOptionsOut(BaseModel):
    months: List[MonthOption]
    years: List[int]
    classes: List[str]
    payment_methods: List[str]
    statuses: List[str]


class DashboardOut(BaseModel):
    total_students: int
    month: int
    year: int
    fees_collected: int
    pending_fees: int
