import logging
from flask import Flask, flash, jsonify, redirect, request, session, url_for
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager


from .config import DebugConfig

# --- Extension Instantiation ---
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
login_manager.login_view = "auth_bp.login"
login_manager.login_message_category = "warning"

app_logger = logging.getLogger(__name__)


def _configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.logger.setLevel(level)


def _register_template_helpers(app):
    from netline.analytics import MONTH_NAMES, format_local

    @app.template_filter("currency")
    def currency_filter(value):
        """Whole currency units with thousands separators: HTG 12,345"""
        return f"{app.config['CURRENCY']} {round(value or 0):,}"

    @app.template_filter("local_time")
    def local_time_filter(value):
        return format_local(value, app.config["APP_TIMEZONE"])

    @app.context_processor
    def inject_dashboard_context():
        return {
            "theme": session.get("theme", "light"),
            "month_names": MONTH_NAMES,
        }


# --- Application Factory Function ---
def create_app(config_object=DebugConfig):
    app = Flask(__name__)
    app.config.from_object(config_object)

    _configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    # --- User Loader ---
    from .models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        # API clients get a status code, browsers get the login page
        if request.path.startswith("/api/"):
            return jsonify({"error": "Authentication required"}), 401
        flash("Please log in to access this page.", "warning")
        return redirect(url_for("auth_bp.login", next=request.path))

    _register_template_helpers(app)

    # --- Register Blueprints ---
    with app.app_context():
        from .main import bp as main_bp

        app.register_blueprint(main_bp)

        from .auth import bp as auth_bp

        app.register_blueprint(auth_bp, url_prefix="/auth")

        from .api import api_bp

        app.register_blueprint(api_bp)

        from .live import bp as live_bp

        app.register_blueprint(live_bp)

        from .errors import bp as errors_bp

        app.register_blueprint(errors_bp)

        from .health import health_bp

        app.register_blueprint(health_bp)

        app_logger.info("Blueprints registered.")

    from netline.cli import register_cli_commands

    register_cli_commands(app)

    return app
