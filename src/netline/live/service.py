from flask import current_app

from netline.live.presence import PresenceBoard, normalize_snapshot
from netline.models import get_variable

# Shared by the web views and the poller listener of this process
board = PresenceBoard()


def load_snapshot():
    """Raw connected-clients array from the snapshot variable ([] if unset)."""
    variable = get_variable(current_app.config["LIVE_SNAPSHOT_VARIABLE"])
    if variable is None:
        return []
    return variable.array_data or []


def sync_board(target: PresenceBoard = board):
    """Replace the board contents with the stored snapshot."""
    connections = normalize_snapshot(load_snapshot(), current_app.config["APP_TIMEZONE"])
    target.update(connections)
    return target.snapshot
