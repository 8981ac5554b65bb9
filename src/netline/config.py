import os
from decouple import config, Csv


def _commission_rates(raw):
    """Parse "VENDOR:10,SYSTEM_ADMINISTRATOR:0" into a role -> percentage dict."""
    rates = {}
    for item in Csv()(raw):
        role, _, pct = item.partition(":")
        rates[role.strip().upper()] = float(pct)
    return rates


class Config(object):
    # Base directory for relative paths (e.g., SQLite DB)
    basedir = os.path.abspath(os.path.dirname(__file__))

    SECRET_KEY = os.environ.get("SECRET_KEY", config("SECRET_KEY", default="S#perS3crEt_007"))

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = config("LOG_LEVEL", default="INFO")

    # Dashboard display
    APP_TIMEZONE = config("APP_TIMEZONE", default="Etc/GMT+5")
    CURRENCY = config("CURRENCY", default="HTG")
    CLIENTS_PER_PAGE = config("CLIENTS_PER_PAGE", default=20, cast=int)
    PLAN_SALES_PER_PAGE = config("PLAN_SALES_PER_PAGE", default=10, cast=int)
    TOP_CUSTOMERS = 3

    # Role -> commission percentage
    COMMISSION_RATES = config(
        "COMMISSION_RATES",
        default="VENDOR:10,SYSTEM_ADMINISTRATOR:0",
        cast=_commission_rates,
    )

    # Live presence feed (PubNub)
    PUBNUB_PUBLISH_KEY = config("PUBNUB_PUBLISH_KEY", default=None)
    PUBNUB_SUBSCRIBE_KEY = config("PUBNUB_SUBSCRIBE_KEY", default=None)
    PUBNUB_USER_ID = config("PUBNUB_USER_ID", default="NetlineClientIDWeb")
    LIVE_REQUEST_CHANNEL = config("LIVE_REQUEST_CHANNEL", default="NetlineMessageReceiver")
    LIVE_NOTIFY_CHANNEL = config("LIVE_NOTIFY_CHANNEL", default="NetlineMessageListenner")
    LIVE_POLL_INTERVAL = config("LIVE_POLL_INTERVAL", default=8.0, cast=float)
    LIVE_SNAPSHOT_VARIABLE = "connected_users"

    # Base configuration for database connection parameters, retrieved from OS environment
    DBUSER = os.environ.get("DBUSER")
    DBPASS = os.environ.get("DBPASS")
    DBHOST = os.environ.get("DBHOST")
    DBNAME = os.environ.get("DBNAME")


class ProductionConfig(Config):
    """Configuration for production (Postgres with SSL)"""
    DEBUG = False

    SQLALCHEMY_DATABASE_URI = (
        f"postgresql+psycopg2://{Config.DBUSER}:{Config.DBPASS}"
        f"@{Config.DBHOST}/{Config.DBNAME}?sslmode=require"
    )


class DevelopmentConfig(Config):
    """Configuration for running with Docker Compose (Postgres without SSL)"""
    DEBUG = True

    SQLALCHEMY_DATABASE_URI = (
        f"postgresql+psycopg2://{Config.DBUSER}:{Config.DBPASS}"
        f"@{Config.DBHOST}/{Config.DBNAME}"
    )


class DebugConfig(Config):
    """Configuration for simple local debugging (Fallback to SQLite)"""
    DEBUG = True

    SQLALCHEMY_DATABASE_URI = (
        "sqlite:///" + os.path.join(Config.basedir, "db.sqlite3")
    )


class TestingConfig(Config):
    """In-memory SQLite, CSRF off, fixed commission table."""
    TESTING = True
    DEBUG = False
    WTF_CSRF_ENABLED = False
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    APP_TIMEZONE = "Etc/GMT+5"
    COMMISSION_RATES = {"VENDOR": 10.0, "SYSTEM_ADMINISTRATOR": 0.0}
    PUBNUB_PUBLISH_KEY = None
    PUBNUB_SUBSCRIBE_KEY = None


config_dict = {
    "Production": ProductionConfig,
    "Development": DevelopmentConfig,
    "Debug": DebugConfig,
    "Testing": TestingConfig,
}
