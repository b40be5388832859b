"""Channel port — abstract interface for delivering notifications."""

from abc import ABC, abstractmethod


class ChannelPort(ABC):
    """Abstract interface for notification channel adapters."""

    @abstractmethod
    def publish(self, channel: str, event_type: str, payload: dict) -> dict:
        """Deliver one event to a named channel (``admin``, ``user-42``, ...).

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
