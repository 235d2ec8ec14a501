"""
Derived fee views: per student-year summaries, the dashboard's monthly totals,
the month grid and the admin list filters.

Everything here works on records already fetched from the store and is
recomputed on every read.
"""
from dataclasses import dataclass

from feeledger.models.fees import PAID, UNPAID
from feeledger.services.calendar import MONTHS

INSERTION = "insertion"
CALENDAR = "calendar"
LATEST_ORDERINGS = (INSERTION, CALENDAR)


@dataclass
class FeeSummary:
    paid_count: int = 0
    unpaid_count: int = 0
    total_paid: int = 0
    total_pending: int = 0


@dataclass
class MonthlyTotals:
    month: int
    year: int
    collected: int = 0
    pending: int = 0


def summarize(records) -> FeeSummary:
    summary = FeeSummary()
    for fee in records:
        if fee.status == PAID:
            summary.paid_count += 1
            summary.total_paid += fee.amount
        elif fee.status == UNPAID:
            summary.unpaid_count += 1
            summary.total_pending += fee.amount
    return summary


def monthly_totals(records, month, year) -> MonthlyTotals:
    """Collected and pending amounts across all students for one month."""
    totals = MonthlyTotals(month=month, year=year)
    for fee in records:
        if fee.month != month or fee.year != year:
            continue
        if fee.status == PAID:
            totals.collected += fee.amount
        elif fee.status == UNPAID:
            totals.pending += fee.amount
    return totals


def month_grid(records):
    """Twelve (month, name, fee-or-None) slots in calendar order."""
    by_month = {fee.month: fee for fee in records}
    return [(number, name, by_month.get(number)) for number, name in MONTHS]


def latest_fees(records, ordering=INSERTION):
    """
    Map student id -> that student's latest fee record.

    ``insertion`` takes the last record in the order the store delivered them
    (creation order). ``calendar`` takes the greatest (year, month).
    """
    if ordering not in LATEST_ORDERINGS:
        raise ValueError(f"Unknown latest fee ordering: {ordering}")

    latest = {}
    for fee in records:
        current = latest.get(fee.student_id)
        if current is None or ordering == INSERTION:
            latest[fee.student_id] = fee
        elif (fee.year, fee.month) >= (current.year, current.month):
            latest[fee.student_id] = fee
    return latest


def filter_by_latest_status(students, records, status, ordering=INSERTION):
    """Students whose latest fee record has ``status``; "all" or None keeps everyone."""
    if status in (None, "", "all"):
        return list(students)

    latest = latest_fees(records, ordering)
    return [
        s for s in students
        if s.id in latest and latest[s.id].status == status
    ]


def filter_students(students, search="", class_name=None):
    """Case-insensitive name search plus class filter."""
    needle = (search or "").strip().lower()
    result = []
    for s in students:
        if needle and needle not in s.name.lower():
            continue
        if class_name and class_name != "all" and s.class_name != class_name:
            continue
        result.append(s)
    return result
