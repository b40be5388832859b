"""Tests for channel adapters and the channel registry."""

import pytest

from storefront.notifications.channel import configured_channel, get_channel, reset_channels
from storefront.notifications.channel.fake_channel import FakeChannelAdapter
from storefront.notifications.channel.log_channel import LoggingChannelAdapter


class TestRegistry:
    def setup_method(self):
        reset_channels()

    def teardown_method(self):
        reset_channels()

    def test_fake_channel_is_a_singleton(self):
        assert isinstance(get_channel("fake"), FakeChannelAdapter)
        assert get_channel("fake") is get_channel("fake")

    def test_log_channel(self):
        assert isinstance(get_channel("log"), LoggingChannelAdapter)

    def test_unknown_channel(self):
        with pytest.raises(ValueError):
            get_channel("carrier-pigeon")

    def test_reset_builds_new_instances(self):
        first = get_channel("fake")
        reset_channels()
        assert get_channel("fake") is not first


class TestFakeChannelAdapter:
    def test_records_messages(self):
        adapter = FakeChannelAdapter()
        result = adapter.publish("admin", "OrderCreated", {"order_id": 1})
        assert result["status"] == "sent"
        assert adapter.messages_for("admin") == [
            {
                "message_id": result["message_id"],
                "channel": "admin",
                "event_type": "OrderCreated",
                "payload": {"order_id": 1},
            }
        ]

    def test_filters_by_event_type(self):
        adapter = FakeChannelAdapter()
        adapter.publish("admin", "OrderCreated", {})
        adapter.publish("admin", "InventoryChanged", {})
        adapter.publish("user-1", "OrderCreated", {})
        assert len(adapter.messages_for("admin")) == 2
        assert len(adapter.messages_for("admin", "InventoryChanged")) == 1

    def test_configured_failure(self):
        adapter = FakeChannelAdapter()
        adapter.configure(should_succeed=False, failure_reason="Socket closed")
        result = adapter.publish("admin", "OrderCreated", {})
        assert result == {"message_id": None, "status": "failed", "error": "Socket closed"}
        assert adapter.published == []

    def test_configured_exception(self):
        adapter = FakeChannelAdapter()
        adapter.configure(raise_error=ConnectionError("boom"))
        with pytest.raises(ConnectionError):
            adapter.publish("admin", "OrderCreated", {})

    def test_reset_restores_defaults(self):
        adapter = FakeChannelAdapter()
        adapter.publish("admin", "OrderCreated", {})
        adapter.configure(should_succeed=False)
        adapter.reset()
        assert adapter.published == []
        assert adapter.publish("admin", "OrderCreated", {})["status"] == "sent"


class TestLoggingChannelAdapter:
    def test_reports_sent(self):
        result = LoggingChannelAdapter().publish("admin", "InventoryChanged", {"product_id": 3})
        assert result["status"] == "sent"
        assert result["message_id"].startswith("msg-")


class TestConfiguredChannel:
    def teardown_method(self):
        reset_channels()

    def test_test_environment_uses_the_fake(self):
        assert isinstance(configured_channel(), FakeChannelAdapter)

    def test_environment_variable_overrides_domain_config(self, monkeypatch):
        monkeypatch.setenv("STOREFRONT_NOTIFICATION_CHANNEL", "log")
        assert isinstance(configured_channel(), LoggingChannelAdapter)
