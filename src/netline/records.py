"""
Record source

Reads whole tables as raw documents (the shape the upstream store exports)
and applies the small MongoDB-style query language the passthrough accepts:

    {"type": "VENDOR"}                                   equality
    {"type": {"$in": ["VENDOR", "SYSTEM_ADMINISTRATOR"]}} membership
    {"scheduler_datas.used_data": 0}                     dotted paths

The aggregation engine always receives the full result set.
"""

import json
import logging

from netline.analytics import normalize_sales, normalize_users
from netline.models import User, Sale, PlanHistory, Variable, RoleType

logger = logging.getLogger(__name__)

TABLES = {
    "users": User,
    "solds": Sale,
    "histories": PlanHistory,
    "variables": Variable,
}

STAFF_ROLES = [RoleType.VENDOR.value, RoleType.SYSTEM_ADMINISTRATOR.value]


class RecordSourceError(Exception):
    status_code = 400


class UnknownTableError(RecordSourceError):
    status_code = 404

    def __init__(self, table):
        self.table = table
        super().__init__(f"Unknown table: {table}")


class InvalidQueryError(RecordSourceError):
    status_code = 400


def parse_params(raw):
    """Decode the ``params`` query string argument into a query dict."""
    if raw is None or raw == "":
        return {}
    try:
        query = json.loads(raw)
    except ValueError as e:
        raise InvalidQueryError(f"params is not valid JSON: {e}") from e
    if not isinstance(query, dict):
        raise InvalidQueryError("params must be a JSON object")
    return query


def _lookup(document, path):
    value = document
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return None
        value = value[part]
    return value


def _matches(value, condition):
    if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
        for operator, operand in condition.items():
            if operator == "$in":
                if not isinstance(operand, list):
                    raise InvalidQueryError("$in expects a list")
                if value not in operand:
                    return False
            elif operator == "$ne":
                if value == operand:
                    return False
            else:
                raise InvalidQueryError(f"Unsupported operator: {operator}")
        return True
    return value == condition


def match_document(document, query):
    return all(_matches(_lookup(document, path), cond) for path, cond in query.items())


def fetch_documents(table, query=None):
    """All documents of ``table`` matching ``query``."""
    model = TABLES.get(table)
    if model is None:
        raise UnknownTableError(table)
    query = query or {}
    documents = [row.to_document() for row in model.query.order_by(model.id).all()]
    matched = [doc for doc in documents if match_document(doc, query)]
    logger.debug("Fetched %d/%d documents from %s", len(matched), len(documents), table)
    return matched


# --- Normalized loaders used by the dashboard views ---

def load_users(query=None):
    return normalize_users(fetch_documents("users", query))


def load_staff():
    return load_users({"type": {"$in": STAFF_ROLES}})


def load_solds():
    return normalize_sales(fetch_documents("solds"))


def load_histories(users=None):
    """Plan activations with client names resolved from ``users``."""
    if users is None:
        users = load_users()
    return normalize_sales(fetch_documents("histories"), users)
