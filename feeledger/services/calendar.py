"""Month names, fee year window and the fixed class roster."""
import datetime

MONTHS = [
    (1, "january"), (2, "february"), (3, "march"), (4, "april"),
    (5, "may"), (6, "june"), (7, "july"), (8, "august"),
    (9, "september"), (10, "october"), (11, "november"), (12, "december"),
]

MONTH_NUMBERS = [number for number, _ in MONTHS]
MONTH_NAMES = dict(MONTHS)

CLASS_OPTIONS = [
    "nursery", "lkg", "ukg",
    "class1", "class2", "class3", "class4", "class5",
    "class6", "class7", "class8", "class9", "class10",
]


def month_name(month) -> str:
    """Symbolic name for month 1-12; anything else falls back to january."""
    return MONTH_NAMES[month] if month in MONTH_NUMBERS else "january"


def fee_year_window(today=None):
    """Five selectable fee years: two before the current year to two after."""
    year = (today or datetime.date.today()).year
    return list(range(year - 2, year + 3))
