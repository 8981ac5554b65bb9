import csv
import io
from datetime import datetime, timezone

import pytest

from netline.analytics import (
    Role,
    UnknownRoleError,
    UserRecord,
    commission_csv,
    commission_reports,
    export_filename,
    filter_reports,
    report_totals,
    split,
)

from conftest import make_sale


RATES = {"VENDOR": 10.0, "SYSTEM_ADMINISTRATOR": 0.0}


class TestSplit:
    def test_vendor(self):
        parts = split(1000, Role.VENDOR)
        assert (parts.vendor_pct, parts.vendor_amount, parts.system_pct, parts.system_amount) == (10, 100, 90, 900)

    def test_administrator(self):
        parts = split(1000, "SYSTEM_ADMINISTRATOR")
        assert (parts.vendor_pct, parts.vendor_amount, parts.system_pct, parts.system_amount) == (0, 0, 100, 1000)

    @pytest.mark.parametrize("total", [0, 1, 333.33, 1234567.89])
    def test_conservation(self, total):
        parts = split(total, Role.VENDOR)
        assert parts.vendor_amount + parts.system_amount == pytest.approx(total)

    def test_unknown_role(self):
        with pytest.raises(UnknownRoleError):
            split(100, Role.CLIENT)
        with pytest.raises(UnknownRoleError):
            split(100, None)

    def test_negative_total(self):
        with pytest.raises(ValueError):
            split(-1, Role.VENDOR)

    def test_custom_rates(self):
        assert split(200, Role.VENDOR, {"VENDOR": 12.5}).vendor_amount == 25.0


@pytest.fixture
def users():
    return [
        UserRecord(id="1", display_name="Jean", role=Role.VENDOR),
        UserRecord(id="2", display_name="Admin", role=Role.SYSTEM_ADMINISTRATOR),
        UserRecord(id="3", display_name="Idle", role=Role.VENDOR),
        UserRecord(id="4", display_name="Marie", role=Role.CLIENT),
        UserRecord(id="5", display_name="Ghost", role=None),
    ]


@pytest.fixture
def sales():
    july = datetime(2024, 7, 10, 15, 0, tzinfo=timezone.utc)
    return [
        make_sale(price=100.0, vendor_id="1"),
        make_sale(price=50.0, vendor_id="1"),
        make_sale(price=200.0, vendor_id="2"),
        make_sale(price=400.0, vendor_id="1", when=july),
        make_sale(price=999.0, vendor_id="99"),
    ]


class TestCommissionReports:
    def test_reports_sorted_by_total(self, users, sales):
        reports = commission_reports(users, sales, month=7, year=2024, rates=RATES)
        assert [r.vendor_name for r in reports] == ["Admin", "Jean", "Idle"]
        assert [r.total_sales for r in reports] == [200.0, 150.0, 0.0]

    def test_vendor_report(self, users, sales):
        jean = [r for r in commission_reports(users, sales, month=7, year=2024, rates=RATES)
                if r.vendor_id == "1"][0]
        assert jean.sales_count == 2
        assert jean.commission_percentage == 10.0
        assert jean.commission_amount == 15.0
        assert jean.system_amount == 135.0
        assert jean.vendor_role == "VENDOR"

    def test_all_periods(self, users, sales):
        reports = commission_reports(users, sales, rates=RATES)
        assert reports[0].vendor_name == "Jean"
        assert reports[0].total_sales == 550.0

    def test_negative_price_sale_is_skipped(self, users):
        sales = [make_sale(price=100.0, vendor_id="2"), make_sale(price=-50.0, vendor_id="1")]
        reports = {r.vendor_id: r for r in commission_reports(users, sales, rates=RATES)}
        assert reports["1"].total_sales == 0.0
        assert reports["1"].sales_count == 0
        assert reports["2"].total_sales == 100.0

    def test_clients_and_unknown_roles_are_left_out(self, users, sales):
        names = {r.vendor_name for r in commission_reports(users, sales, rates=RATES)}
        assert "Marie" not in names
        assert "Ghost" not in names

    def test_filter_and_totals(self, users, sales):
        reports = commission_reports(users, sales, month=7, year=2024, rates=RATES)
        assert len(filter_reports(reports, "all")) == 3
        assert len(filter_reports(reports, None)) == 3
        assert [r.vendor_name for r in filter_reports(reports, "VENDOR")] == ["Jean", "Idle"]
        totals = report_totals(reports)
        assert totals == {
            "total_sales": 350.0,
            "total_commission": 15.0,
            "total_system": 335.0,
            "total_count": 3,
        }


class TestExport:
    def test_csv_layout(self, users, sales):
        reports = commission_reports(users, sales, month=7, year=2024, rates=RATES)
        rows = list(csv.reader(io.StringIO(commission_csv(reports))))
        assert rows[0] == [
            "Name", "Type", "Total Sales", "Commission %",
            "Commission Amount", "System Amount", "Sales Count",
        ]
        assert rows[1] == ["Admin", "SYSTEM_ADMINISTRATOR", "200.00", "0%", "0.00", "200.00", "1"]
        assert rows[2] == ["Jean", "VENDOR", "150.00", "10%", "15.00", "135.00", "2"]
        assert rows[4] == [""] * 7
        assert rows[5] == ["TOTAL", "", "350.00", "", "15.00", "335.00", "3"]

    def test_empty_report(self):
        rows = list(csv.reader(io.StringIO(commission_csv([]))))
        assert len(rows) == 3
        assert rows[2][0] == "TOTAL"

    def test_filename(self):
        assert export_filename(7, 2024) == "commission-report-August-2024.csv"
        assert export_filename(None, None) == "commission-report-all-all.csv"
