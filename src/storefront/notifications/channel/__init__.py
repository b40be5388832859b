"""Channel adapter registry — pluggable notification delivery channels.

Provides singleton access to channel adapters. ``fake`` records messages in
memory for tests; ``log`` writes them to the structured log.
"""

from storefront.notifications.channel.port import ChannelPort
from storefront.shared.settings import setting

CHANNEL_TYPES = ("fake", "log")

_channel_instances: dict[str, ChannelPort] = {}


def get_channel(channel_type: str = "log") -> ChannelPort:
    """Return the configured channel adapter (singleton per channel type).

    Args:
        channel_type: One of ``CHANNEL_TYPES``
    """
    if channel_type not in _channel_instances:
        if channel_type == "fake":
            from storefront.notifications.channel.fake_channel import FakeChannelAdapter

            _channel_instances[channel_type] = FakeChannelAdapter()
        elif channel_type == "log":
            from storefront.notifications.channel.log_channel import LoggingChannelAdapter

            _channel_instances[channel_type] = LoggingChannelAdapter()
        else:
            raise ValueError(f"Unknown channel type: {channel_type}")

    return _channel_instances[channel_type]


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()


def configured_channel() -> ChannelPort:
    """The adapter named by the ``notification_channel`` setting."""
    return get_channel(setting("notification_channel", "log"))
