from netline.main import bp
from flask import (
    Response,
    abort,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    session,
    url_for,
)
from flask_login import login_required
from urllib.parse import urlparse

from netline.analytics import (
    MONTH_NAMES,
    commission_csv,
    commission_reports,
    export_filename,
    filter_reports,
    paginate,
    report_totals,
    search,
)
from netline.main.forms import CommissionFilterForm, DateRangeForm
from netline.main.utils import (
    app_timezone,
    client_rows,
    daily_chart,
    dashboard_globals,
    local_today,
    monthly_chart,
    parse_int_param,
    plan_members,
    plan_sales_analytics,
    sold_plans,
)
from netline.records import load_histories, load_solds, load_staff, load_users


def _date_range():
    """Validated start/end dates from the query string, defaulting to today."""
    today = local_today()
    form = DateRangeForm(request.args, data={"start": today, "end": today})
    if not form.validate():
        for errors in form.errors.values():
            for error in errors:
                flash(error, "warning")
        form = DateRangeForm(data={"start": today, "end": today})
    return form


@bp.route("/")
@bp.route("/index")
@login_required
def index():
    users = load_users()
    histories = load_histories(users)

    form = _date_range()
    analytics = plan_sales_analytics(
        histories,
        form.start.data,
        form.end.data,
        top=current_app.config["TOP_CUSTOMERS"],
    )

    # --- Client list (search + pagination) ---
    clients = search(client_rows(users, histories), form.q.data or "", "name", "id")
    clients_page = paginate(
        clients,
        page=request.args.get("page", 1, type=int),
        per_page=current_app.config["CLIENTS_PER_PAGE"],
    )

    today = local_today()
    year = parse_int_param("year", default=today.year, minimum=1970, maximum=9999)
    month = parse_int_param("month", default=today.month - 1, minimum=0, maximum=11)

    return render_template(
        "main/index.html",
        segment="index",
        form=form,
        globals=dashboard_globals(users, histories),
        plans=sold_plans(histories),
        analytics=analytics,
        clients_page=clients_page,
        monthly=monthly_chart(histories, year),
        daily=daily_chart(histories, year, month),
    )


@bp.route("/plans/<path:plan_name>")
@login_required
def plan_detail(plan_name):
    """Sales of a single plan in the selected date range, searchable by client."""
    form = _date_range()
    members = plan_members(load_histories(), plan_name, form.start.data, form.end.data)
    members = search(members, form.q.data or "", "client_name")
    sales_page = paginate(
        members,
        page=request.args.get("page", 1, type=int),
        per_page=current_app.config["PLAN_SALES_PER_PAGE"],
    )
    return render_template(
        "main/plan_detail.html",
        segment="index",
        plan_name=plan_name,
        form=form,
        sales_page=sales_page,
        tz=app_timezone(),
    )


# ===========================================
# Sell history - commission reports
# ===========================================

def _commission_context():
    today = local_today()
    solds = load_solds()
    years = list(range(today.year, today.year - 5, -1))

    form = CommissionFilterForm(
        request.args,
        month_names=MONTH_NAMES,
        years=years,
        data={"month": str(today.month - 1), "year": str(today.year), "type": "all"},
    )
    if not form.validate():
        for errors in form.errors.values():
            for error in errors:
                flash(error, "warning")
        abort(400)

    month = None if form.month.data == "all" else int(form.month.data)
    year = None if form.year.data == "all" else int(form.year.data)

    reports = commission_reports(
        load_staff(),
        solds,
        month=month,
        year=year,
        tz=app_timezone(),
        rates=current_app.config["COMMISSION_RATES"],
    )
    reports = filter_reports(reports, form.type.data)
    return {
        "form": form,
        "month": month,
        "year": year,
        "reports": reports,
        "totals": report_totals(reports),
    }


@bp.route("/sell-history")
@login_required
def sell_history():
    context = _commission_context()
    return render_template("main/sell_history.html", segment="sell-history", **context)


@bp.route("/sell-history/export.csv")
@login_required
def sell_history_export():
    context = _commission_context()
    body = commission_csv(context["reports"], context["totals"])
    filename = export_filename(context["month"], context["year"])
    current_app.logger.info(f"Commission report exported: {filename} ({len(context['reports'])} rows)")
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


# ===========================================
# Theme
# ===========================================

@bp.route("/theme/toggle", methods=["POST"])
@login_required
def toggle_theme():
    session["theme"] = "light" if session.get("theme", "light") == "dark" else "dark"
    next_page = request.form.get("next") or request.referrer
    if next_page and urlparse(next_page).netloc in ("", request.host):
        return redirect(next_page)
    return redirect(url_for("main_bp.index"))
