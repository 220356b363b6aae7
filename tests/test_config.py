"""Unit tests for configuration loading."""

import pytest
from pydantic import ValidationError

from parking_lot.config import AppConfig, LotConfig, NotificationConfig, load_config
from parking_lot.lot.notifications import OverflowPolicy


class TestLotConfig:
    def test_defaults(self):
        cfg = AppConfig()
        assert cfg.lot.total_slots == 10
        assert cfg.lot.whitelist == []
        assert cfg.lot.processing_delay_seconds == 1.0
        assert cfg.notifications.overflow == OverflowPolicy.DROP_OLDEST

    def test_rejects_non_positive_slots(self):
        with pytest.raises(ValidationError):
            LotConfig(total_slots=0)

    def test_rejects_negative_delay(self):
        with pytest.raises(ValidationError):
            LotConfig(processing_delay_seconds=-0.5)

    def test_rejects_blank_whitelist_entry(self):
        with pytest.raises(ValidationError):
            LotConfig(whitelist=["ABC123", " "])

    def test_whitelist_env_var_and_duplicates(self, monkeypatch):
        monkeypatch.setenv("VIP_PLATE", "VIP001")
        cfg = LotConfig(whitelist=["ABC123", "${VIP_PLATE}", "ABC123"])
        assert cfg.whitelist == ["ABC123", "VIP001"]

    def test_whitelist_entries_are_stripped(self):
        cfg = LotConfig(whitelist=[" ABC123 ", "ABC123"])
        assert cfg.whitelist == ["ABC123"]

    def test_rejects_zero_buffer(self):
        with pytest.raises(ValidationError):
            NotificationConfig(buffer_size=0)


class TestLoadConfig:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "lot:\n"
            "  total_slots: 25\n"
            "  whitelist: [ABC123]\n"
            "  processing_delay_seconds: 0\n"
            "notifications:\n"
            "  overflow: unbounded\n"
            "api:\n"
            "  port: 9000\n"
        )

        cfg = load_config(path)

        assert cfg.lot.total_slots == 25
        assert cfg.lot.whitelist == ["ABC123"]
        assert cfg.notifications.overflow == OverflowPolicy.UNBOUNDED
        assert cfg.api.port == 9000
        assert cfg.logging.level == "INFO"

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == AppConfig()
