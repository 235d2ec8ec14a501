"""
Fee ledger model: one row per student per month per year.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from feeledger.database import Base
from feeledger.models.students import utcnow

PAID = "paid"
UNPAID = "unpaid"
FEE_STATUSES = (PAID, UNPAID)

QR = "qr"
CASH = "cash"
MANUAL = "manual"
PAYMENT_METHODS = (QR, CASH, MANUAL)


class FeeRecord(Base):
    __tablename__ = "fee_records"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(String(255), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)

    month = Column(Integer, nullable=False)  # 1..12
    year = Column(Integer, nullable=False)

    # Snapshot of the student's monthly fee when the record was created
    amount = Column(Integer, nullable=False)

    status = Column(String(10), nullable=False, default=UNPAID)
    payment_method = Column(String(10), nullable=True)   # qr, cash, manual
    transaction_id = Column(String(100), nullable=True)  # qr payments only
    paid_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow)

    # One fee per student per month per year, enforced by the store itself
    __table_args__ = (
        UniqueConstraint("student_id", "month", "year", name="uq_fee_student_month_year"),
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_fee_month"),
        CheckConstraint("status IN ('paid', 'unpaid')", name="ck_fee_status"),
        CheckConstraint(
            "payment_method IS NULL OR payment_method IN ('qr', 'cash', 'manual')",
            name="ck_fee_payment_method",
        ),
    )

    student = relationship("Student", back_populates="fees")
