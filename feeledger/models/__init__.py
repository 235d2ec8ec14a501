from feeledger.models.students import Student
from feeledger.models.fees import FeeRecord

__all__ = ["Student", "FeeRecord"]
