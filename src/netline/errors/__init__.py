from flask import Blueprint

bp = Blueprint("errors_bp", __name__)

from netline.errors import handlers  # noqa: F401, E402
