"""Month calendar markers derived from the log book."""

from __future__ import annotations

import calendar
from datetime import date

from src.models.tracking import CalendarDay
from src.saheli.logbook import LogCollection, coerce_logs, date_key


def month_markers(logs: LogCollection, year: int, month: int) -> list[CalendarDay]:
    """Return one marker per day of ``month``, in date order.

    Days without a log (or with an empty one) get all markers off.
    """
    by_day = coerce_logs(logs)
    _, days_in_month = calendar.monthrange(year, month)

    markers = []
    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        log = by_day.get(date_key(day))
        if log is None or log.is_empty:
            markers.append(CalendarDay(date=day))
            continue
        markers.append(
            CalendarDay(
                date=day,
                has_log=True,
                has_mood=log.mood is not None,
                has_water=bool(log.water_cups),
                has_exercise=log.exercised,
                is_period=log.is_period,
            )
        )
    return markers
