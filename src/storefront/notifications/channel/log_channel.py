"""Logging channel adapter — writes each delivery to the structured log.

The default adapter outside tests; stands in for a push or websocket
transport, which is outside this service.
"""

from uuid import uuid4

import structlog

from storefront.notifications.channel.port import ChannelPort

logger = structlog.get_logger(__name__)


class LoggingChannelAdapter(ChannelPort):
    def publish(self, channel: str, event_type: str, payload: dict) -> dict:
        message_id = f"msg-{uuid4().hex[:12]}"
        logger.info(
            "Notification published",
            channel=channel,
            event_type=event_type,
            message_id=message_id,
            payload=payload,
        )
        return {"message_id": message_id, "status": "sent"}
