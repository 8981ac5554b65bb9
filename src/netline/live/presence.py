"""
Connected clients snapshot

The network controller publishes the full list of connected clients as one
array. Each update replaces the previous one entirely; there is no
incremental contract.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

from netline.analytics import INVALID_DISPLAY, format_local

logger = logging.getLogger(__name__)


def format_speed(bits_per_second) -> str:
    """1500 -> "1.50 Kbps", 2500000 -> "2.50 Mbps"."""
    try:
        value = float(bits_per_second or 0)
    except (TypeError, ValueError):
        value = 0.0
    if value > 1000000:
        return f"{value / 1000000:.2f} Mbps"
    if value > 1000:
        return f"{value / 1000:.2f} Kbps"
    return f"{value:.2f} bps"


@dataclass(frozen=True)
class Connection:
    name: str
    connection_number: str
    uptime: str
    activation_date: str
    expiration_date: str
    data_used: str
    ip_address: str
    mac_address: str
    download: str
    upload: str

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "connectionNumber": self.connection_number,
            "uptime": self.uptime,
            "activationDate": self.activation_date,
            "expirationDate": self.expiration_date,
            "dataUsed": self.data_used,
            "dataLimit": "Unlimited",
            "ipAddress": self.ip_address,
            "macAddress": self.mac_address,
            "downloadSpeed": self.download,
            "uploadSpeed": self.upload,
        }


def normalize_connection(message: dict, tz) -> Connection:
    """Turn one raw connected-client entry into display values."""
    schedule = message.get("schedule_data") or {}
    bandwidth = message.get("bandwitch") or {}
    used = schedule.get("used_data")
    try:
        data_used = f"{float(used):.2f}" if used is not None else "0.00"
    except (TypeError, ValueError):
        data_used = "0.00"
    return Connection(
        name=str(message.get("complete_name") or ""),
        connection_number=str(message.get("connexion_number") or ""),
        uptime=str(message.get("uptime") or ""),
        activation_date=format_local(schedule.get("activation_date"), tz),
        expiration_date=format_local(schedule.get("expiration_date"), tz),
        data_used=data_used,
        ip_address=str(message.get("ip") or INVALID_DISPLAY),
        mac_address=str(message.get("mac_address") or INVALID_DISPLAY),
        download=format_speed(bandwidth.get("rx")),
        upload=format_speed(bandwidth.get("tx")),
    )


def normalize_snapshot(messages: Optional[Iterable[dict]], tz) -> Tuple[Connection, ...]:
    if not messages:
        return ()
    return tuple(normalize_connection(m, tz) for m in messages if isinstance(m, dict))


class PresenceBoard:
    """Holds the latest snapshot. Readers always see one complete snapshot."""

    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot: Tuple[Connection, ...] = ()
        self._updated_at: Optional[datetime] = None

    def update(self, connections: Iterable[Connection]) -> None:
        snapshot = tuple(connections)
        with self._lock:
            self._snapshot = snapshot
            self._updated_at = datetime.now(timezone.utc)
        logger.debug("Presence snapshot replaced: %d connections", len(snapshot))

    def clear(self) -> None:
        with self._lock:
            self._snapshot = ()
            self._updated_at = None

    @property
    def snapshot(self) -> Tuple[Connection, ...]:
        with self._lock:
            return self._snapshot

    @property
    def updated_at(self) -> Optional[datetime]:
        with self._lock:
            return self._updated_at
