from datetime import datetime, timezone

import pytz

from netline.analytics import (
    Role,
    SaleStatus,
    format_local,
    normalize_sale,
    normalize_sales,
    normalize_user,
    parse_timestamp,
    to_local,
)


EXPECTED = datetime(2024, 8, 15, 10, 0, tzinfo=timezone.utc)


class TestParseTimestamp:
    def test_date_wrapper_and_plain_string_agree(self):
        assert parse_timestamp({"$date": "2024-08-15T10:00:00Z"}) == parse_timestamp("2024-08-15T10:00:00Z")
        assert parse_timestamp("2024-08-15T10:00:00Z") == EXPECTED

    def test_known_shapes(self):
        assert parse_timestamp("2024-08-15T10:00:00.000+00:00") == EXPECTED
        assert parse_timestamp("2024-08-15T05:00:00-05:00") == EXPECTED
        assert parse_timestamp({"$date": {"$numberLong": "1723716000000"}}) == EXPECTED
        assert parse_timestamp(1723716000000) == EXPECTED

    def test_any_fraction_length(self):
        assert parse_timestamp("2024-08-15T10:00:00.5Z") == EXPECTED.replace(microsecond=500000)
        assert parse_timestamp("2024-08-15T10:00:00.1234567+00:00") == EXPECTED.replace(microsecond=123456)

    def test_naive_values_are_utc(self):
        assert parse_timestamp("2024-08-15T10:00:00") == EXPECTED
        assert parse_timestamp(datetime(2024, 8, 15, 10, 0)) == EXPECTED

    def test_invalid_values(self):
        for value in (None, "", "undefined", "not a date", {"foo": 1}, True, [1]):
            assert parse_timestamp(value) is None


class TestNormalizeSale:
    def test_solds_document(self):
        raw = {
            "_id": {"$oid": "66bd"},
            "name": "Daily",
            "price": "150",
            "by": "7",
            "status": "completed",
            "date": {"$date": "2024-08-15T10:00:00Z"},
        }
        record = normalize_sale(raw)
        assert record.id == "66bd"
        assert record.plan_name == "Daily"
        assert record.price == 150.0
        assert record.vendor_id == "7"
        assert record.status is SaleStatus.COMPLETED
        assert record.timestamp == EXPECTED
        assert record.is_valid

    def test_history_document_resolves_client_name(self):
        raw = {"_id": "1", "plan": "Weekly", "price": 500, "user_id": "3", "created_at": "2024-08-15T10:00:00Z"}
        record = normalize_sale(raw, {"3": "Marie Client"})
        assert record.plan_name == "Weekly"
        assert record.client_id == "3"
        assert record.client_name == "Marie Client"

    def test_bad_fields_degrade(self):
        record = normalize_sale({"price": "abc", "date": "garbage", "status": "weird"})
        assert record.price == 0.0
        assert record.timestamp is None
        assert not record.is_valid
        assert record.status is SaleStatus.OTHER
        assert record.vendor_id is None

    def test_negative_price_counts_as_zero(self):
        assert normalize_sale({"price": -50, "date": "2024-08-15T10:00:00Z"}).price == 0.0
        assert normalize_sale({"price": "-1.5"}).price == 0.0

    def test_normalize_sales_with_users(self):
        users = [normalize_user({"_id": "3", "complete_name": "Marie", "type": "CLIENT"})]
        records = normalize_sales([{"plan": "Daily", "user_id": "3"}], users)
        assert records[0].client_name == "Marie"


class TestNormalizeUser:
    def test_roles_and_names(self):
        user = normalize_user({"_id": "1", "lastname": "Pierre", "type": "vendor", "password": "x"})
        assert user.display_name == "Pierre"
        assert user.role is Role.VENDOR

    def test_unknown_role(self):
        assert normalize_user({"_id": "1", "type": "MANAGER"}).role is None


class TestLocalTime:
    def test_fixed_offset_zone(self):
        local = to_local(EXPECTED, "Etc/GMT+5")
        assert local.hour == 5
        assert local.utcoffset().total_seconds() == -5 * 3600

    def test_accepts_tz_objects(self):
        assert to_local(EXPECTED, pytz.timezone("Etc/GMT+5")).hour == 5

    def test_format_local(self):
        assert format_local("2024-08-15T10:00:00Z", "Etc/GMT+5") == "2024-08-15T05:00:00"
        assert format_local(None, "Etc/GMT+5") == "N/A"
        assert format_local("bogus", "Etc/GMT+5") == "N/A"
