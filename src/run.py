from decouple import config
from netline import create_app, db
from netline.config import config_dict
import os

# --- ENVIRONMENT DETECTION LOGIC ---

# 1. Production Mode Check (Highest Priority)
IS_PRODUCTION = "RUNNING_IN_PRODUCTION" in os.environ

if IS_PRODUCTION:
    get_config_mode = "Production"
    DEBUG = False

# 2. Local Docker Compose Check
elif os.environ.get("FLASK_ENV") == "development" and "DBHOST" in os.environ:
    get_config_mode = "Development"
    DEBUG = True

# 3. Default Local Debug (Fallback to SQLite)
else:
    get_config_mode = "Debug"
    DEBUG = True

ENVIRONMENT = get_config_mode.lower()


# --- APP INITIALIZATION ---

if IS_PRODUCTION:
    from netline.settings.production import Config as app_config
else:
    app_config = config_dict[get_config_mode]

app = create_app(app_config)
app.app_context().push()

app.logger.info(f"Environment: {ENVIRONMENT}")
app.logger.info(f"DEBUG: {DEBUG}")
app.logger.info(f"Database: {db.engine.url.render_as_string(hide_password=True)}")

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=config("PORT", default=5000, cast=int), debug=DEBUG)
