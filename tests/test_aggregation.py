from types import SimpleNamespace

import pytest

from feeledger.services.aggregation import (
    summarize, monthly_totals, month_grid, filter_by_latest_status, filter_students, latest_fees,
)


def fee(student_id, month, year, amount, status):
    return SimpleNamespace(student_id=student_id, month=month, year=year, amount=amount, status=status)


def student(id, name="Student", class_name="class1"):
    return SimpleNamespace(id=id, name=name, class_name=class_name)


RECORDS = [
    fee(1, 1, 2026, 700, "paid"),
    fee(1, 2, 2026, 700, "paid"),
    fee(1, 3, 2026, 700, "unpaid"),
    fee(2, 1, 2026, 500, "unpaid"),
    fee(2, 2, 2026, 500, "paid"),
]


def test_summarize():
    s = summarize(RECORDS)
    assert (s.paid_count, s.unpaid_count) == (3, 2)
    assert (s.total_paid, s.total_pending) == (1900, 1200)


def test_summarize_partitions_every_record():
    s = summarize(RECORDS)
    assert s.paid_count + s.unpaid_count == len(RECORDS)
    assert s.total_paid + s.total_pending == sum(r.amount for r in RECORDS)


def test_summarize_empty():
    s = summarize([])
    assert (s.paid_count, s.unpaid_count, s.total_paid, s.total_pending) == (0, 0, 0, 0)


def test_monthly_totals_across_students():
    totals = monthly_totals(RECORDS + [fee(3, 1, 2025, 900, "paid")], 1, 2026)
    assert totals.collected == 700
    assert totals.pending == 500


def test_month_grid_has_twelve_slots():
    grid = month_grid([r for r in RECORDS if r.student_id == 1])
    assert len(grid) == 12
    assert grid[0][1] == "january"
    assert grid[2][2].status == "unpaid"
    assert grid[3][2] is None


def test_filter_by_latest_status_uses_insertion_order():
    # Student 1 entered March (unpaid) before back-filling January as paid
    records = [
        fee(1, 3, 2026, 700, "unpaid"),
        fee(1, 1, 2026, 700, "paid"),
        fee(2, 1, 2026, 500, "unpaid"),
    ]
    students = [student(1), student(2), student(3)]

    paid = filter_by_latest_status(students, records, "paid")
    unpaid = filter_by_latest_status(students, records, "unpaid")
    assert [s.id for s in paid] == [1]
    assert [s.id for s in unpaid] == [2]


def test_filter_by_latest_status_calendar_ordering():
    records = [
        fee(1, 3, 2026, 700, "unpaid"),
        fee(1, 1, 2026, 700, "paid"),
        fee(1, 12, 2025, 700, "paid"),
    ]
    students = [student(1)]
    assert filter_by_latest_status(students, records, "unpaid", ordering="calendar") == students
    assert filter_by_latest_status(students, records, "paid", ordering="calendar") == []


def test_filter_all_keeps_everyone():
    students = [student(1), student(9)]
    assert filter_by_latest_status(students, RECORDS, "all") == students
    assert filter_by_latest_status(students, RECORDS, None) == students


def test_students_without_fees_never_match_a_status():
    students = [student(9)]
    assert filter_by_latest_status(students, RECORDS, "paid") == []
    assert filter_by_latest_status(students, RECORDS, "unpaid") == []


def test_unknown_ordering():
    with pytest.raises(ValueError):
        latest_fees(RECORDS, ordering="alphabetical")


def test_filter_students_by_name_and_class():
    students = [
        student(1, "Aarav Sharma", "class3"),
        student(2, "Anaya Sharma", "ukg"),
        student(3, "Vihaan Gupta", "class3"),
    ]
    assert [s.id for s in filter_students(students, "sharma")] == [1, 2]
    assert [s.id for s in filter_students(students, "", "class3")] == [1, 3]
    assert [s.id for s in filter_students(students, "  aarav ", "class3")] == [1]
    assert [s.id for s in filter_students(students, "", "all")] == [1, 2, 3]
