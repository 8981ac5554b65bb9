import logging
from flask import jsonify, render_template, request
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from netline.errors import bp
from netline import db

logger = logging.getLogger(__name__)

MESSAGES = {
    400: "Bad request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not found",
    500: "Internal server error",
    503: "Database unavailable",
}


def _safe_rollback():
    """Rollback the DB session without raising if the connection is dead."""
    try:
        db.session.rollback()
    except SQLAlchemyError as e:
        logger.warning("Rollback failed: %s", e)
    finally:
        db.session.remove()


def _respond(status):
    """JSON for API clients, an HTML page for everyone else."""
    if request.path.startswith("/api/"):
        return jsonify({"error": MESSAGES[status]}), status
    return render_template(f"errors/{status}.html"), status


# ── HTTP error handlers ───────────────────────────────────────────────────────

@bp.app_errorhandler(400)
def bad_request_error(error):
    return _respond(400)


@bp.app_errorhandler(401)
def unauthorized_error(error):
    return _respond(401)


@bp.app_errorhandler(403)
def forbidden_error(error):
    return _respond(403)


@bp.app_errorhandler(404)
def not_found_error(error):
    return _respond(404)


@bp.app_errorhandler(500)
def internal_error(error):
    _safe_rollback()
    logger.error("500 Internal Server Error: %s", error)
    return _respond(500)


@bp.app_errorhandler(503)
def service_unavailable_error(error):
    _safe_rollback()
    return _respond(503)


# ── Database / connectivity exception handlers ────────────────────────────────
# SQLAlchemy exceptions bubbling out of a view get a "database unavailable"
# page instead of a generic server error.

@bp.app_errorhandler(OperationalError)
def db_operational_error(error):
    """Handles DB connection failures (network down, server unreachable, etc.)."""
    _safe_rollback()
    logger.error("Database OperationalError: %s", error)
    return _respond(503)


@bp.app_errorhandler(SQLAlchemyError)
def db_generic_error(error):
    """Handles any other SQLAlchemy error not caught by OperationalError handler."""
    _safe_rollback()
    logger.error("SQLAlchemyError: %s", error)
    return _respond(500)
