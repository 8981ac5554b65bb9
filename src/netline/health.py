"""
Health check endpoints for monitoring and load balancer integration.
"""

from flask import Blueprint, jsonify, current_app
from netline import db
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

health_bp = Blueprint('health', __name__)


@health_bp.route('/health')
def health_check():
    """
    Returns 200 whenever the application is running; reports the database
    state without failing on it.
    """
    try:
        db.session.execute(text('SELECT 1'))
        db_status = 'connected'
    except SQLAlchemyError as e:
        db_status = f'error: {str(e)}'

    return jsonify({
        'status': 'healthy',
        'database': db_status,
        'app': 'NETLINE',
        'version': '1.0.0'
    }), 200


@health_bp.route('/health/ready')
def readiness_check():
    """
    Readiness check - verifies database connectivity.
    Returns 200 only if all dependencies are available.
    """
    checks = {
        'database': False,
        'status': 'unhealthy'
    }

    try:
        with db.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        checks['database'] = True
    except SQLAlchemyError as e:
        checks['database_error'] = str(e)
        return jsonify(checks), 503

    checks['status'] = 'ready'
    return jsonify(checks), 200


@health_bp.route('/health/live')
def liveness_check():
    """
    Liveness check - verifies the application process is alive.
    """
    return jsonify({
        'status': 'alive',
        'debug': current_app.debug
    }), 200
