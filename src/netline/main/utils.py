from datetime import date, datetime
from flask import current_app, request
import pytz

from netline.analytics import (
    MONTH_NAMES,
    Role,
    available_months,
    available_years,
    customer_totals,
    daily_counts,
    daily_revenue,
    days_in_month,
    filter_by_local_dates,
    group_by,
    monthly_counts,
    monthly_revenue,
    plan_summaries,
    top_n,
    total_revenue,
)


def app_timezone():
    return pytz.timezone(current_app.config["APP_TIMEZONE"])


def local_today() -> date:
    return datetime.now(pytz.utc).astimezone(app_timezone()).date()


def parse_int_param(name, default=None, minimum=None, maximum=None):
    """
    Integer query argument, or ``default`` when missing, "all", out of range
    or not a number.
    """
    raw = request.args.get(name)
    if raw is None or raw == "" or raw.lower() == "all":
        return default
    try:
        value = int(raw)
    except ValueError:
        current_app.logger.warning(f"Invalid {name} received: {raw}. Using default.")
        return default
    if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
        return default
    return value


# ===========================================
# Dashboard overview
# ===========================================

def dashboard_globals(users, histories):
    """Headline cards: clients, revenue, cards sold, plans on sale."""
    return {
        "total_users": len(users),
        "total_revenue": total_revenue(histories),
        "total_cards": len(histories),
        "active_plans": len(plan_summaries(histories)),
    }


def sold_plans(histories):
    """Plans ordered by revenue, highest first."""
    plans = [
        {"name": g.key, "count": g.count, "sold": g.total_revenue, "status": "active"}
        for g in plan_summaries(histories)
    ]
    return top_n(plans, "sold", len(plans))


def client_rows(users, histories):
    """One row per named client with the plans they bought."""
    by_client_id = group_by(histories, lambda r: r.client_id)
    rows = []
    for user in users:
        if user.role not in (Role.CLIENT, None) or not user.display_name:
            continue
        group = by_client_id.get(user.id)
        plans = [
            {"name": g.key, "count": g.count, "value": g.total_revenue}
            for g in plan_summaries(group.members if group else [])
        ]
        rows.append({
            "id": user.user_number or user.id,
            "name": user.display_name,
            "registration_date": user.registered_at,
            "plans_sold": plans,
            "total_sold": group.total_revenue if group else 0.0,
        })
    return rows


def plan_sales_analytics(histories, start_date=None, end_date=None, top=3):
    """Per-plan summaries and top customers for a local date range."""
    filtered = filter_by_local_dates(histories, start_date, end_date, app_timezone())
    summaries = plan_summaries(filtered)
    return {
        "summaries": summaries,
        "total_revenue": sum(s.total_revenue for s in summaries),
        "top_customers": top_n(customer_totals(filtered), "total_spent", top),
        "sales_count": len(filtered),
    }


def plan_members(histories, plan_name, start_date=None, end_date=None):
    """Sales of one plan in the date range, for the plan detail view."""
    filtered = filter_by_local_dates(histories, start_date, end_date, app_timezone())
    return [r for r in filtered if r.plan_name == plan_name]


# ===========================================
# Charts
# ===========================================

def monthly_chart(records, year):
    tz = app_timezone()
    return {
        "year": year,
        "labels": MONTH_NAMES,
        "revenue": monthly_revenue(records, year, tz),
        "counts": monthly_counts(records, year, tz),
        "years": available_years(records, tz),
    }


def daily_chart(records, year, month):
    tz = app_timezone()
    return {
        "year": year,
        "month": month,
        "month_name": MONTH_NAMES[month],
        "labels": [str(day) for day in range(1, days_in_month(year, month) + 1)],
        "revenue": daily_revenue(records, year, month, tz),
        "counts": daily_counts(records, year, month, tz),
        "years": available_years(records, tz),
        "months": available_months(records, year, tz),
    }
