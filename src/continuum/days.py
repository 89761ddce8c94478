"""Calendar-day helpers shared by the model layer and the streak engine."""

from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Optional, Union

Moment = Union[date, datetime]


def today(tz: Optional[tzinfo] = None) -> date:
    """Return the current calendar day, local unless ``tz`` is given."""

    return datetime.now(tz).date()


def normalize_day(moment: Moment, tz: Optional[tzinfo] = None) -> date:
    """Map a timestamp to its calendar day.

    Aware datetimes are converted to ``tz`` (system local when omitted) before
    the day is taken. Naive datetimes are already local wall time.
    """

    if isinstance(moment, datetime):
        if moment.tzinfo is not None:
            moment = moment.astimezone(tz)
        return moment.date()
    return moment
