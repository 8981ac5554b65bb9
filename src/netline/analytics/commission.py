"""
Commission Splitter

Revenue attributed to a staff member is split between the staff member and
the system according to a role -> percentage table:

    VENDOR                10%  (system keeps 90%)
    SYSTEM_ADMINISTRATOR   0%  (system keeps 100%)

Amounts keep full float precision; rounding is a display concern.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Union

from netline.analytics.aggregator import by_vendor, group_by
from netline.analytics.filters import filter_by_period
from netline.analytics.normalizer import Role, SaleRecord, UserRecord


DEFAULT_COMMISSION_RATES: Dict[str, float] = {
    Role.VENDOR.value: 10.0,
    Role.SYSTEM_ADMINISTRATOR.value: 0.0,
}


class UnknownRoleError(ValueError):
    """Raised when a role has no entry in the commission table."""

    def __init__(self, role):
        self.role = role
        super().__init__(f"No commission rate configured for role {role!r}")


@dataclass(frozen=True)
class CommissionSplit:
    vendor_pct: float
    vendor_amount: float
    system_pct: float
    system_amount: float


@dataclass(frozen=True)
class VendorCommissionReport:
    vendor_id: str
    vendor_name: str
    vendor_role: str
    total_sales: float
    commission_percentage: float
    commission_amount: float
    system_percentage: float
    system_amount: float
    sales_count: int


def _role_key(role: Union[Role, str, None]) -> Optional[str]:
    if isinstance(role, Role):
        return role.value
    if role is None:
        return None
    return str(role).upper()


def rate_for(role, rates: Mapping[str, float] = DEFAULT_COMMISSION_RATES) -> float:
    key = _role_key(role)
    if key is None or key not in rates:
        raise UnknownRoleError(role)
    return float(rates[key])


def split(total_sales: float, role, rates: Mapping[str, float] = DEFAULT_COMMISSION_RATES) -> CommissionSplit:
    if total_sales < 0:
        raise ValueError(f"total_sales must be >= 0, got {total_sales}")
    vendor_pct = rate_for(role, rates)
    system_pct = 100 - vendor_pct
    return CommissionSplit(
        vendor_pct=vendor_pct,
        vendor_amount=total_sales * vendor_pct / 100,
        system_pct=system_pct,
        system_amount=total_sales * system_pct / 100,
    )


def commission_reports(
    users: Iterable[UserRecord],
    sales: Iterable[SaleRecord],
    month: Optional[int] = None,
    year: Optional[int] = None,
    tz="Etc/GMT+5",
    rates: Mapping[str, float] = DEFAULT_COMMISSION_RATES,
) -> List[VendorCommissionReport]:
    """
    One report per user with a configured rate, highest total sales first.

    Users without a rate (clients, unknown roles) are left out. Sales are
    restricted to the month/year window before they are attributed; sales
    with a negative price are malformed and skipped.
    """
    in_period = filter_by_period(sales, month, year, tz)
    by_seller = group_by((s for s in in_period if s.price >= 0), by_vendor)

    reports = []
    for user in users:
        if _role_key(user.role) not in rates:
            continue
        group = by_seller.get(user.id)
        total = group.total_revenue if group else 0.0
        parts = split(total, user.role, rates)
        reports.append(
            VendorCommissionReport(
                vendor_id=user.id,
                vendor_name=user.display_name,
                vendor_role=_role_key(user.role),
                total_sales=total,
                commission_percentage=parts.vendor_pct,
                commission_amount=parts.vendor_amount,
                system_percentage=parts.system_pct,
                system_amount=parts.system_amount,
                sales_count=group.count if group else 0,
            )
        )

    reports.sort(key=lambda r: r.total_sales, reverse=True)
    return reports


def filter_reports(reports: Iterable[VendorCommissionReport], role=None) -> List[VendorCommissionReport]:
    """Restrict reports to one role; None or "all" keeps everything."""
    key = _role_key(role)
    if key is None or key == "ALL":
        return list(reports)
    return [r for r in reports if r.vendor_role == key]


def report_totals(reports: Iterable[VendorCommissionReport]) -> dict:
    reports = list(reports)
    return {
        "total_sales": sum(r.total_sales for r in reports),
        "total_commission": sum(r.commission_amount for r in reports),
        "total_system": sum(r.system_amount for r in reports),
        "total_count": sum(r.sales_count for r in reports),
    }
