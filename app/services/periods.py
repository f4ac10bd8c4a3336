# app/services/periods.py
#
# Period helpers
# Turns the (year, month) query parameters of the report endpoints into
# half-open date ranges: [start, end_exclusive).

from datetime import date

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def get_month_range(year: int, month: int):
    """
    Returns (start_date, end_date_exclusive) for one calendar month.
    """
    if not (1 <= month <= 12):
        raise ValueError(f"month must be between 1 and 12, got {month}")

    start_date = date(year, month, 1)
    if month == 12:
        end_date_exclusive = date(year + 1, 1, 1)
    else:
        end_date_exclusive = date(year, month + 1, 1)
    return start_date, end_date_exclusive


def get_period_range(year: int, month: int | None = None):
    """
    year + optional month -> (start_date, end_date_exclusive, label, months).

    label is 'YYYY-MM' for a single month and 'YYYY' for a whole year;
    months is the number of calendar months the period spans.
    """
    if month:
        start, end = get_month_range(year, month)
        return start, end, f"{year:04d}-{month:02d}", 1

    return date(year, 1, 1), date(year + 1, 1, 1), f"{year:04d}", 12


def month_name(month: int) -> str:
    return MONTH_NAMES[month - 1]
