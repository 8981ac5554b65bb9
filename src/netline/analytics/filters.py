"""Period filters over normalized sale records."""

from datetime import date, datetime, time, timezone
from typing import Iterable, List, Optional

from netline.analytics.normalizer import SaleRecord, get_timezone, to_local


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
FAR_FUTURE = datetime(9999, 12, 31, 23, 59, 59, 999999, tzinfo=timezone.utc)


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def filter_by_range(
    records: Iterable[SaleRecord],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[SaleRecord]:
    """
    Keep records with ``start <= timestamp <= end`` (both bounds inclusive).

    Open bounds default to the epoch and a far-future sentinel. Records
    with an invalid timestamp never match.
    """
    lower = _aware(start) if start is not None else EPOCH
    upper = _aware(end) if end is not None else FAR_FUTURE
    return [
        r for r in records
        if r.is_valid and lower <= r.timestamp <= upper
    ]


def local_day_bounds(day: date, tz):
    """UTC start and end instants of a calendar day in the target timezone."""
    zone = get_timezone(tz)
    start = zone.localize(datetime.combine(day, time.min)).astimezone(timezone.utc)
    end = zone.localize(datetime.combine(day, time.max)).astimezone(timezone.utc)
    return start, end


def filter_by_local_dates(
    records: Iterable[SaleRecord],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    tz="Etc/GMT+5",
) -> List[SaleRecord]:
    """Whole-day inclusive range over local calendar dates."""
    start = local_day_bounds(start_date, tz)[0] if start_date else None
    end = local_day_bounds(end_date, tz)[1] if end_date else None
    return filter_by_range(records, start, end)


def filter_by_period(
    records: Iterable[SaleRecord],
    month: Optional[int] = None,
    year: Optional[int] = None,
    tz="Etc/GMT+5",
) -> List[SaleRecord]:
    """
    Keep records whose local month (0..11) and/or year match.

    An omitted field is a wildcard. With both omitted every record is
    kept, including ones with an invalid timestamp.
    """
    records = list(records)
    if month is None and year is None:
        return records

    matched = []
    for record in records:
        local = to_local(record.timestamp, tz)
        if local is None:
            continue
        if month is not None and local.month - 1 != month:
            continue
        if year is not None and local.year != year:
            continue
        matched.append(record)
    return matched
