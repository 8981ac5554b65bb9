from flask import Blueprint

bp = Blueprint("live_bp", __name__, url_prefix="/live-connected")

from netline.live import routes  # noqa: F401, E402
