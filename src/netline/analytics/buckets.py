"""Monthly and daily revenue buckets for the dashboard charts."""

import calendar
from typing import Iterable, List

from netline.analytics.normalizer import SaleRecord, to_local


MONTH_NAMES = list(calendar.month_name)[1:]


def days_in_month(year: int, month: int) -> int:
    """``month`` is 0-based (0 = January)."""
    return calendar.monthrange(year, month + 1)[1]


def _local_parts(records: Iterable[SaleRecord], tz):
    for record in records:
        local = to_local(record.timestamp, tz)
        if local is not None:
            yield record, local


def monthly_revenue(records: Iterable[SaleRecord], year: int, tz) -> List[float]:
    slots = [0.0] * 12
    for record, local in _local_parts(records, tz):
        if local.year == year:
            slots[local.month - 1] += record.price
    return slots


def monthly_counts(records: Iterable[SaleRecord], year: int, tz) -> List[int]:
    slots = [0] * 12
    for _, local in _local_parts(records, tz):
        if local.year == year:
            slots[local.month - 1] += 1
    return slots


def daily_revenue(records: Iterable[SaleRecord], year: int, month: int, tz) -> List[float]:
    slots = [0.0] * days_in_month(year, month)
    for record, local in _local_parts(records, tz):
        if local.year == year and local.month - 1 == month:
            slots[local.day - 1] += record.price
    return slots


def daily_counts(records: Iterable[SaleRecord], year: int, month: int, tz) -> List[int]:
    slots = [0] * days_in_month(year, month)
    for _, local in _local_parts(records, tz):
        if local.year == year and local.month - 1 == month:
            slots[local.day - 1] += 1
    return slots


def available_years(records: Iterable[SaleRecord], tz) -> List[int]:
    """Years with at least one sale, newest first."""
    return sorted({local.year for _, local in _local_parts(records, tz)}, reverse=True)


def available_months(records: Iterable[SaleRecord], year: int, tz) -> List[int]:
    """0-based months of ``year`` with at least one sale, ascending."""
    return sorted({local.month - 1 for _, local in _local_parts(records, tz) if local.year == year})
