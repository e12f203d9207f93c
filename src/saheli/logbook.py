"""Date-keyed log collection helpers.

The persistence collaborator stores logs as a mapping of ``YYYY-MM-DD`` →
log payload.  These helpers turn that mapping into validated ``DailyLog``
objects and apply saves without mutating the caller's collection.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any, Union

from src.models.tracking import DailyLog

logger = logging.getLogger("saheli.logbook")

LogCollection = Union[Mapping[str, Union[DailyLog, Mapping[str, Any]]], Iterable[DailyLog]]


def as_day(value: date | datetime) -> date:
    """Truncate a timestamp to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def date_key(value: date | datetime) -> str:
    """Return the canonical ``YYYY-MM-DD`` key for a day."""
    return as_day(value).isoformat()


def coerce_logs(logs: LogCollection) -> dict[str, DailyLog]:
    """Normalise a log collection into ``{date_key: DailyLog}``.

    Accepts either a mapping keyed by date (values may be ``DailyLog`` or raw
    dicts; the key supplies the date when the payload has none) or a plain
    iterable of ``DailyLog``.  When two entries share a date the later one
    wins.

    Raises:
        pydantic.ValidationError: If a raw payload cannot be parsed.
    """
    result: dict[str, DailyLog] = {}

    if isinstance(logs, Mapping):
        items: Iterable[Any] = logs.items()
    else:
        items = ((None, log) for log in logs)

    for key, value in items:
        if isinstance(value, DailyLog):
            log = value
        else:
            payload = dict(value)
            if "date" not in payload and key is not None:
                payload["date"] = key
            log = DailyLog.model_validate(payload)
        if key is not None and key != date_key(log.date):
            logger.debug("Log keyed %s carries date %s; using the log's date", key, log.date)
        result[date_key(log.date)] = log

    return result


def get_day_log(logs: Mapping[str, DailyLog], day: date | datetime) -> DailyLog:
    """Return the log for ``day``, or an empty log when nothing was recorded."""
    return logs.get(date_key(day)) or DailyLog(date=as_day(day))


def save_day_log(logs: Mapping[str, DailyLog], log: DailyLog) -> dict[str, DailyLog]:
    """Return a new collection with ``log`` stored under its date.

    Saving an empty log removes the entry, since an empty log is the same
    as no entry.  The input mapping is left untouched.
    """
    updated = dict(logs)
    key = date_key(log.date)
    if log.is_empty:
        updated.pop(key, None)
    else:
        updated[key] = log
    return dict(sorted(updated.items()))


def logged_days(logs: LogCollection) -> list[DailyLog]:
    """Return the non-empty logs ordered by date, oldest first."""
    return [log for _, log in sorted(coerce_logs(logs).items()) if not log.is_empty]
