"""
Group-By Aggregator

``group_by`` walks the records in input order; the first time a key is seen
fixes its position in the output mapping. Consumers that need a numeric
order sort the values afterwards (see ``netline.analytics.ranking``).
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Hashable, Iterable, List

from netline.analytics.normalizer import SaleRecord, to_local


@dataclass
class Group:
    key: Hashable
    count: int = 0
    total_revenue: float = 0.0
    members: List[SaleRecord] = field(default_factory=list)

    def add(self, record: SaleRecord) -> None:
        self.count += 1
        self.total_revenue += record.price
        self.members.append(record)


def group_by(records: Iterable[SaleRecord], key_fn: Callable[[SaleRecord], Hashable]) -> Dict[Hashable, Group]:
    groups: Dict[Hashable, Group] = {}
    for record in records:
        key = key_fn(record)
        if key not in groups:
            groups[key] = Group(key=key)
        groups[key].add(record)
    return groups


# --- Key functions ---

def by_plan(record: SaleRecord) -> str:
    return record.plan_name


def by_vendor(record: SaleRecord):
    return record.vendor_id


def by_client(record: SaleRecord) -> str:
    return record.client_name


def local_day(tz) -> Callable[[SaleRecord], object]:
    """Key on the local calendar date; invalid timestamps share the None key."""
    def key(record: SaleRecord):
        local = to_local(record.timestamp, tz)
        return local.date() if local else None
    return key


def local_month(tz) -> Callable[[SaleRecord], object]:
    """Key on (year, month 0..11) in local time."""
    def key(record: SaleRecord):
        local = to_local(record.timestamp, tz)
        return (local.year, local.month - 1) if local else None
    return key


# --- Summaries used by the dashboard ---

def total_revenue(records: Iterable[SaleRecord]) -> float:
    return sum(r.price for r in records)


def plan_summaries(records: Iterable[SaleRecord]) -> List[Group]:
    """Per-plan count and revenue, in first-seen order."""
    return list(group_by(records, by_plan).values())


def customer_totals(records: Iterable[SaleRecord]) -> List[dict]:
    """Per-customer spend, used by the top customers leaderboard."""
    return [
        {
            "name": group.key,
            "total_spent": group.total_revenue,
            "purchase_count": group.count,
        }
        for group in group_by(records, by_client).values()
    ]
