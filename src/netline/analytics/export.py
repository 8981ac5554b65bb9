import csv
import io
from typing import Iterable, Optional

from netline.analytics.buckets import MONTH_NAMES
from netline.analytics.commission import VendorCommissionReport, report_totals


CSV_HEADERS = [
    "Name",
    "Type",
    "Total Sales",
    "Commission %",
    "Commission Amount",
    "System Amount",
    "Sales Count",
]


def _pct(value: float) -> str:
    # 10.0 -> "10%", 12.5 -> "12.5%"
    return f"{value:g}%"


def commission_csv(reports: Iterable[VendorCommissionReport], totals: Optional[dict] = None) -> str:
    """Serialize commission reports with a blank separator row and a TOTAL row."""
    reports = list(reports)
    if totals is None:
        totals = report_totals(reports)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for report in reports:
        writer.writerow([
            report.vendor_name,
            report.vendor_role,
            f"{report.total_sales:.2f}",
            _pct(report.commission_percentage),
            f"{report.commission_amount:.2f}",
            f"{report.system_amount:.2f}",
            report.sales_count,
        ])
    writer.writerow([""] * len(CSV_HEADERS))
    writer.writerow([
        "TOTAL",
        "",
        f"{totals['total_sales']:.2f}",
        "",
        f"{totals['total_commission']:.2f}",
        f"{totals['total_system']:.2f}",
        totals["total_count"],
    ])
    return buffer.getvalue()


def export_filename(month: Optional[int], year: Optional[int]) -> str:
    month_label = MONTH_NAMES[month] if month is not None else "all"
    year_label = year if year is not None else "all"
    return f"commission-report-{month_label}-{year_label}.csv"
