"""Fake channel adapter — records published messages for testing."""

import threading
from uuid import uuid4

from storefront.notifications.channel.port import ChannelPort


class FakeChannelAdapter(ChannelPort):
    """Channel adapter that records messages in memory for test assertions."""

    def __init__(self):
        self.published: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Channel delivery failed"
        self.raise_error: Exception | None = None
        self._lock = threading.Lock()

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Channel delivery failed",
        raise_error: Exception | None = None,
    ):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.raise_error = raise_error

    def publish(self, channel: str, event_type: str, payload: dict) -> dict:
        if self.raise_error is not None:
            raise self.raise_error

        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"msg-{uuid4().hex[:12]}"
        with self._lock:
            self.published.append(
                {
                    "message_id": message_id,
                    "channel": channel,
                    "event_type": event_type,
                    "payload": payload,
                }
            )

        return {"message_id": message_id, "status": "sent"}

    def messages_for(self, channel: str, event_type: str | None = None) -> list[dict]:
        with self._lock:
            return [
                message
                for message in self.published
                if message["channel"] == channel and (event_type is None or message["event_type"] == event_type)
            ]

    def reset(self):
        """Clear published messages (useful between tests)."""
        with self._lock:
            self.published.clear()
        self.should_succeed = True
        self.failure_reason = "Channel delivery failed"
        self.raise_error = None
