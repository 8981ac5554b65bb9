from flask import jsonify, render_template
from flask_login import login_required

from netline.live import bp
from netline.live.service import board, sync_board


@bp.route("/")
@login_required
def live_connected():
    connections = sync_board()
    return render_template(
        "live/connected.html",
        segment="live-connected",
        connections=connections,
        updated_at=board.updated_at,
    )


@bp.route("/snapshot.json")
@login_required
def snapshot():
    """Polled by the live page to refresh without a full reload."""
    connections = sync_board()
    return jsonify({
        "count": len(connections),
        "connections": [c.to_dict() for c in connections],
    }), 200
