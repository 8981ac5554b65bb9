from decouple import config
from netline.config import ProductionConfig


class Config(ProductionConfig):
    # Container platforms inject the database credentials as env vars
    SQLALCHEMY_DATABASE_URI = f"postgresql://{config('DBUSER')}:{config('DBPASS')}@{config('DBHOST')}/{config('DBNAME')}"
    SECRET_KEY = config("FLASKSECRET", default="change-this")
    PUBNUB_PUBLISH_KEY = config("PUBNUB_PUBLISH_KEY")
    PUBNUB_SUBSCRIBE_KEY = config("PUBNUB_SUBSCRIBE_KEY")
    DEBUG = False
