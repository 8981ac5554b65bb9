from flask import Blueprint

bp = Blueprint("main_bp", __name__)

from netline.main import routes  # noqa: F401, E402
