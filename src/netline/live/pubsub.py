"""
PubNub transport for the live presence feed.

Requests go out on the request channel; the network controller answers by
writing the connected_users variable and notifying the listener channel.
"""

import logging

from pubnub.callbacks import SubscribeCallback
from pubnub.enums import PNStatusCategory
from pubnub.pnconfiguration import PNConfiguration
from pubnub.pubnub import PubNub

logger = logging.getLogger(__name__)


class LiveFeedNotConfigured(RuntimeError):
    pass


class SnapshotListener(SubscribeCallback):
    """Forwards every message on the notify channel to ``on_notify``."""

    def __init__(self, on_notify):
        super().__init__()
        self.on_notify = on_notify

    def status(self, pubnub, status):
        if status.category == PNStatusCategory.PNConnectedCategory:
            logger.info("Subscribed to presence notifications")
        elif status.is_error():
            logger.warning("PubNub status error: %s", status.category)

    def presence(self, pubnub, presence):
        pass

    def message(self, pubnub, message):
        self.on_notify(message.message)


class PubNubTransport:
    def __init__(self, publish_key, subscribe_key, user_id, request_channel, notify_channel):
        config = PNConfiguration()
        config.publish_key = publish_key
        config.subscribe_key = subscribe_key
        config.user_id = user_id
        self.client = PubNub(config)
        self.request_channel = request_channel
        self.notify_channel = notify_channel

    @classmethod
    def from_config(cls, config):
        if not config.get("PUBNUB_PUBLISH_KEY") or not config.get("PUBNUB_SUBSCRIBE_KEY"):
            raise LiveFeedNotConfigured("PubNub keys are not defined in environment variables")
        return cls(
            publish_key=config["PUBNUB_PUBLISH_KEY"],
            subscribe_key=config["PUBNUB_SUBSCRIBE_KEY"],
            user_id=config["PUBNUB_USER_ID"],
            request_channel=config["LIVE_REQUEST_CHANNEL"],
            notify_channel=config["LIVE_NOTIFY_CHANNEL"],
        )

    def publish(self, message):
        self.client.publish().channel(self.request_channel).message(message).sync()

    def listen(self, on_notify):
        self.client.add_listener(SnapshotListener(on_notify))
        self.client.subscribe().channels([self.notify_channel]).execute()

    def close(self):
        self.client.unsubscribe_all()
        self.client.stop()
