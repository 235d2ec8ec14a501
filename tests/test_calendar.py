import datetime

from feeledger.services.calendar import MONTHS, CLASS_OPTIONS, month_name, fee_year_window


def test_months_in_calendar_order():
    assert [n for n, _ in MONTHS] == list(range(1, 13))
    assert MONTHS[0] == (1, "january")
    assert MONTHS[-1] == (12, "december")


def test_month_name():
    assert month_name(3) == "march"
    assert month_name(12) == "december"


def test_month_name_out_of_range_falls_back_to_january():
    assert month_name(0) == "january"
    assert month_name(13) == "january"
    assert month_name(-4) == "january"
    assert month_name(None) == "january"


def test_fee_year_window():
    assert fee_year_window(datetime.date(2026, 10, 17)) == [2024, 2025, 2026, 2027, 2028]
    assert len(fee_year_window()) == 5
    assert datetime.date.today().year in fee_year_window()


def test_class_roster():
    assert CLASS_OPTIONS[:3] == ["nursery", "lkg", "ukg"]
    assert CLASS_OPTIONS[-1] == "class10"
    assert len(CLASS_OPTIONS) == 13
