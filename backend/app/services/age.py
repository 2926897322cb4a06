from __future__ import annotations

from datetime import date


def calculate_age(dob: date, today: date) -> int:
    """Whole years between ``dob`` and ``today``.

    age = today.year − dob.year, minus one while (month, day) of ``today`` is
    still before the birthday. The birthday itself counts as reached, and a
    29 February birthday is reached on 1 March in non-leap years.

    ``dob`` must not be after ``today``; callers reject such input earlier.
    """

    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age
