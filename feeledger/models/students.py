import datetime

from sqlalchemy import Column, Integer, String, Date, DateTime
from sqlalchemy.orm import relationship

from feeledger.database import Base


def utcnow():
    return datetime.datetime.now(datetime.timezone.utc)


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(String(255), nullable=False, index=True)

    # --- BASIC INFO ---
    name = Column(String(100), nullable=False)
    class_name = Column("class", String(20), nullable=False)  # nursery, lkg, ukg, class1..class10
    father_name = Column(String(100), nullable=False)
    mobile = Column(String(15), nullable=False, index=True)  # digits only, public lookup key
    admission_date = Column(Date, default=datetime.date.today)

    # --- PHOTO ---
    profile_image = Column(String(500), nullable=True)     # public URL
    profile_image_id = Column(String(255), nullable=True)  # image store handle (for cleanup)

    # --- FEE ---
    monthly_fee_amount = Column(Integer, nullable=False, default=500)

    created_at = Column(DateTime, default=utcnow)

    # No ORM cascade: fee records are removed explicitly before the student
    fees = relationship("FeeRecord", back_populates="student", passive_deletes=True)
