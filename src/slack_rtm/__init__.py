"""slack-rtm - a Slack real time messaging client."""

from slack_rtm.connection import Connection, ConnectionState, start
from slack_rtm.delivery import Delivery, indicate_typing, send_message, send_ping, send_raw
from slack_rtm.handler import CloseResult, SlackHandler
from slack_rtm.lookups import (
    lookup_channel_id,
    lookup_channel_name,
    lookup_direct_message_id,
    lookup_user_id,
    lookup_user_name,
)
from slack_rtm.session import Session

__version__ = "0.1.0"

__all__ = [
    "CloseResult",
    "Connection",
    "ConnectionState",
    "Delivery",
    "Session",
    "SlackHandler",
    "indicate_typing",
    "lookup_channel_id",
    "lookup_channel_name",
    "lookup_direct_message_id",
    "lookup_user_id",
    "lookup_user_name",
    "send_message",
    "send_ping",
    "send_raw",
    "start",
]
