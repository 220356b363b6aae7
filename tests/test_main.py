"""Tests for the service entry point."""

import logging

import pytest
from fastapi.testclient import TestClient

from parking_lot import main
from parking_lot.config import AppConfig
from parking_lot.lot.notifications import AvailabilityChannel


class TestAvailabilityLogger:
    @pytest.mark.asyncio
    async def test_logs_until_channel_closes(self, caplog):
        channel = AvailabilityChannel()
        subscription = channel.subscribe()
        channel.publish(1)
        channel.publish(0)
        channel.close()

        with caplog.at_level(logging.INFO, logger="parking_lot.main"):
            await main.log_availability(subscription, total_slots=2)

        assert "Availability: 1/2 slots" in caplog.text
        assert "Lot full: 0/2 slots available" in caplog.text
        assert "Availability feed closed" in caplog.text


class TestLifespan:
    def test_startup_and_shutdown(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(main, "load_app_config", lambda: AppConfig(lot={"total_slots": 3}))

        with TestClient(main.app) as client:
            health = client.get("/api/v1/health").json()
            status = client.get("/api/v1/status").json()
            manager = main.parking_manager

        assert health["manager_running"] is True
        assert status["total_slots"] == 3
        assert manager.closed
        assert main.availability_task.done()


class TestLogging:
    def test_configured_level_applied(self):
        root = logging.getLogger()
        previous = root.level

        try:
            main.configure_logging(AppConfig(logging={"level": "debug"}))
            assert root.level == logging.DEBUG
        finally:
            root.setLevel(previous)

    def test_missing_config_warning_is_emitted(self, monkeypatch, tmp_path, caplog):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(main, "get_config_path", lambda: tmp_path / "config.yaml")

        with caplog.at_level(logging.WARNING, logger="parking_lot.main"):
            cfg = main.load_app_config()

        assert cfg == AppConfig()
        assert "Configuration file not found" in caplog.text
