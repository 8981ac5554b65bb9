"""
Sale Record Normalizer

Converts the raw documents served by the record source into canonical,
immutable records the rest of the engine works on.

Raw dates come in several shapes, depending on how the upstream store
exported them:
- "2024-08-15T10:00:00Z" / "2024-08-15T10:00:00.000+00:00" (ISO strings)
- {"$date": "2024-08-15T10:00:00Z"} (extended JSON wrapper)
- {"$date": {"$numberLong": "1723716000000"}} (canonical extended JSON)
- 1723716000000 (epoch milliseconds)

Anything that cannot be parsed becomes ``None``, the "invalid/N/A" marker.
Callers exclude such records from date-bounded aggregations.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, List, Optional

import pytz


INVALID_DISPLAY = "N/A"
LOCAL_FORMAT = "%Y-%m-%dT%H:%M:%S"

# fromisoformat before 3.11 only takes 3 or 6 fraction digits
_FRACTION = re.compile(r"(T\d{2}:\d{2}:\d{2})\.(\d+)")


class SaleStatus(Enum):
    COMPLETED = "COMPLETED"
    PENDING = "PENDING"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value) -> "SaleStatus":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except (ValueError, AttributeError):
            return cls.OTHER


class Role(Enum):
    VENDOR = "VENDOR"
    SYSTEM_ADMINISTRATOR = "SYSTEM_ADMINISTRATOR"
    CLIENT = "CLIENT"

    @classmethod
    def parse(cls, value) -> Optional["Role"]:
        """Unknown or missing roles map to None."""
        if isinstance(value, cls):
            return value
        if hasattr(value, "name"):
            value = value.name
        try:
            return cls(str(value).strip().upper())
        except (ValueError, AttributeError):
            return None


@dataclass(frozen=True)
class SaleRecord:
    id: str
    plan_name: str
    price: float
    vendor_id: Optional[str]
    timestamp: Optional[datetime]
    status: SaleStatus = SaleStatus.COMPLETED
    client_id: Optional[str] = None
    client_name: str = ""
    number: str = ""

    @property
    def is_valid(self) -> bool:
        return self.timestamp is not None


@dataclass(frozen=True)
class UserRecord:
    id: str
    display_name: str
    role: Optional[Role]
    registered_at: Optional[datetime] = None
    user_number: str = ""


def _from_epoch_ms(value) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(float(value) / 1000.0, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def _from_iso(value: str) -> Optional[datetime]:
    text = value.strip()
    if not text or text in ("undefined", "null"):
        return None
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", text)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        # naive timestamps from the store are UTC
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse any of the known raw date shapes into an aware UTC datetime."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, dict):
        if "$date" not in value:
            return None
        inner = value["$date"]
        if isinstance(inner, dict):
            return _from_epoch_ms(inner.get("$numberLong"))
        return parse_timestamp(inner)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, (int, float)):
        return _from_epoch_ms(value)
    if isinstance(value, str):
        return _from_iso(value)
    return None


def _raw_id(raw: dict) -> str:
    value = raw.get("_id", raw.get("id", ""))
    if isinstance(value, dict):
        value = value.get("$oid", "")
    return "" if value is None else str(value)


def _optional_id(value) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, dict):
        value = value.get("$oid")
    return None if value is None else str(value)


def _price(value) -> float:
    """Unparseable and negative prices count as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        price = float(value)
    except (TypeError, ValueError):
        return 0.0
    return price if price > 0 else 0.0


def normalize_sale(raw: dict, client_names: Optional[dict] = None) -> SaleRecord:
    """
    Build a SaleRecord from a raw "solds" or "histories" document.

    ``client_names`` maps client ids to display names, used to fill
    ``client_name`` for history rows that only carry ``user_id``.
    """
    date_value = raw.get("date")
    if date_value is None:
        date_value = raw.get("created_at")
    client_id = _optional_id(raw.get("user_id", raw.get("client_id")))
    client_name = raw.get("client_name") or ""
    if not client_name and client_names and client_id is not None:
        client_name = client_names.get(client_id, "")
    plan = raw.get("plan")
    if plan is None:
        plan = raw.get("planName", raw.get("name", ""))
    return SaleRecord(
        id=_raw_id(raw),
        plan_name=str(plan or ""),
        price=_price(raw.get("price")),
        vendor_id=_optional_id(raw.get("by", raw.get("vendorId"))),
        timestamp=parse_timestamp(date_value),
        status=SaleStatus.parse(raw.get("status", SaleStatus.COMPLETED.value)),
        client_id=client_id,
        client_name=client_name,
        number=str(raw.get("number") or ""),
    )


def normalize_user(raw: dict) -> UserRecord:
    name = raw.get("complete_name") or raw.get("lastname") or raw.get("name") or ""
    return UserRecord(
        id=_raw_id(raw),
        display_name=str(name),
        role=Role.parse(raw.get("type", raw.get("role"))),
        registered_at=parse_timestamp(raw.get("created_at")),
        user_number=str(raw.get("user_number") or ""),
    )


def normalize_users(raws: Iterable[dict]) -> List[UserRecord]:
    return [normalize_user(raw) for raw in raws]


def normalize_sales(raws: Iterable[dict], users: Optional[Iterable[UserRecord]] = None) -> List[SaleRecord]:
    client_names = None
    if users is not None:
        client_names = {u.id: u.display_name for u in users}
    return [normalize_sale(raw, client_names) for raw in raws]


def get_timezone(tz) -> pytz.BaseTzInfo:
    if isinstance(tz, str):
        return pytz.timezone(tz)
    return tz


def to_local(timestamp: Optional[datetime], tz) -> Optional[datetime]:
    """Convert a UTC timestamp to the target timezone; None stays None."""
    if timestamp is None:
        return None
    return timestamp.astimezone(get_timezone(tz))


def format_local(value: Any, tz) -> str:
    """Render any raw date value as local YYYY-MM-DDTHH:MM:SS or "N/A"."""
    local = to_local(parse_timestamp(value), tz)
    if local is None:
        return INVALID_DISPLAY
    return local.strftime(LOCAL_FORMAT)
