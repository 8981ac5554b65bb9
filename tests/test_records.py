import pytest

from netline import db
from netline.models import Variable, get_variable, set_variable
from netline.records import (
    InvalidQueryError,
    UnknownTableError,
    fetch_documents,
    load_histories,
    load_solds,
    load_staff,
    match_document,
    parse_params,
)


class TestMatchDocument:
    doc = {"type": "VENDOR", "scheduler_datas": {"used_data": 0}, "name": "x"}

    def test_equality(self):
        assert match_document(self.doc, {"type": "VENDOR"})
        assert not match_document(self.doc, {"type": "CLIENT"})

    def test_in_and_ne(self):
        assert match_document(self.doc, {"type": {"$in": ["VENDOR", "SYSTEM_ADMINISTRATOR"]}})
        assert not match_document(self.doc, {"type": {"$in": ["CLIENT"]}})
        assert match_document(self.doc, {"type": {"$ne": "CLIENT"}})

    def test_dotted_path(self):
        assert match_document(self.doc, {"scheduler_datas.used_data": 0})
        assert not match_document(self.doc, {"scheduler_datas.missing": 0})

    def test_empty_query(self):
        assert match_document(self.doc, {})

    def test_bad_operators(self):
        with pytest.raises(InvalidQueryError):
            match_document(self.doc, {"type": {"$regex": "V"}})
        with pytest.raises(InvalidQueryError):
            match_document(self.doc, {"type": {"$in": "VENDOR"}})


class TestParseParams:
    def test_values(self):
        assert parse_params(None) == {}
        assert parse_params("") == {}
        assert parse_params('{"type": "VENDOR"}') == {"type": "VENDOR"}

    def test_invalid(self):
        with pytest.raises(InvalidQueryError):
            parse_params("{not json")
        with pytest.raises(InvalidQueryError):
            parse_params("[1, 2]")


class TestFetchDocuments:
    def test_unknown_table(self, app):
        with pytest.raises(UnknownTableError):
            fetch_documents("orders")

    def test_users_never_expose_passwords(self, seeded):
        docs = fetch_documents("users")
        assert len(docs) == 3
        assert all("password_hash" not in d and "password" not in d for d in docs)

    def test_solds_shape(self, seeded):
        doc = fetch_documents("solds")[0]
        assert doc["_id"] == {"$oid": "1"}
        assert doc["date"] == {"$date": "2024-08-15T15:00:00Z"}
        assert doc["by"] == str(seeded["vendor"].id)

    def test_query(self, seeded):
        docs = fetch_documents("users", {"type": {"$in": ["VENDOR", "SYSTEM_ADMINISTRATOR"]}})
        assert sorted(d["username"] for d in docs) == ["admin", "vendor1"]


class TestLoaders:
    def test_staff(self, seeded):
        assert sorted(u.display_name for u in load_staff()) == ["Admin Root", "Jean Vendor"]

    def test_solds_are_attributed(self, seeded):
        solds = load_solds()
        assert len(solds) == 3
        assert {s.vendor_id for s in solds} == {str(seeded["vendor"].id), str(seeded["admin"].id)}

    def test_histories_carry_client_names(self, seeded):
        histories = load_histories()
        assert {h.client_name for h in histories} == {"Marie Client"}
        assert sum(h.price for h in histories) == 600.0


class TestVariables:
    def test_set_and_replace(self, app):
        set_variable("connected_users", [{"complete_name": "A"}])
        db.session.commit()
        set_variable("connected_users", [])
        db.session.commit()
        assert Variable.query.count() == 1
        assert get_variable("connected_users").array_data == []
        assert get_variable("missing") is None
