"""
Revenue and commission aggregation engine.

Every function here is a pure transform over records that the caller has
already fetched; nothing in this package performs I/O.
"""

from netline.analytics.normalizer import (  # noqa: F401
    INVALID_DISPLAY,
    Role,
    SaleRecord,
    SaleStatus,
    UserRecord,
    format_local,
    normalize_sale,
    normalize_sales,
    normalize_user,
    normalize_users,
    parse_timestamp,
    to_local,
)
from netline.analytics.filters import (  # noqa: F401
    filter_by_local_dates,
    filter_by_period,
    filter_by_range,
)
from netline.analytics.aggregator import (  # noqa: F401
    Group,
    by_client,
    by_plan,
    by_vendor,
    customer_totals,
    group_by,
    local_day,
    local_month,
    plan_summaries,
    total_revenue,
)
from netline.analytics.commission import (  # noqa: F401
    DEFAULT_COMMISSION_RATES,
    CommissionSplit,
    UnknownRoleError,
    VendorCommissionReport,
    commission_reports,
    filter_reports,
    report_totals,
    split,
)
from netline.analytics.ranking import top_n  # noqa: F401
from netline.analytics.buckets import (  # noqa: F401
    MONTH_NAMES,
    available_months,
    available_years,
    daily_counts,
    daily_revenue,
    days_in_month,
    monthly_counts,
    monthly_revenue,
)
from netline.analytics.export import commission_csv, export_filename  # noqa: F401
from netline.analytics.paging import Page, paginate, search  # noqa: F401
