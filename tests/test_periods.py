from datetime import date

import pytest

from app.services.periods import get_month_range, get_period_range, month_name


def test_month_range_rolls_over_december():
    assert get_month_range(2024, 2) == (date(2024, 2, 1), date(2024, 3, 1))
    assert get_month_range(2024, 12) == (date(2024, 12, 1), date(2025, 1, 1))


def test_month_range_rejects_bad_month():
    with pytest.raises(ValueError):
        get_month_range(2024, 13)


def test_period_range():
    assert get_period_range(2024, 3) == (date(2024, 3, 1), date(2024, 4, 1), "2024-03", 1)
    assert get_period_range(2024) == (date(2024, 1, 1), date(2025, 1, 1), "2024", 12)


def test_month_name():
    assert month_name(1) == "January"
    assert month_name(12) == "December"
