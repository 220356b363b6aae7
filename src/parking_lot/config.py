"""Configuration models and loading utilities."""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, field_validator

from .lot.notifications import OverflowPolicy

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class LotConfig(BaseModel):
    """Parking lot configuration."""

    total_slots: int = 10
    whitelist: list[str] = []  # Empty admits every plate
    processing_delay_seconds: float = 1.0  # Simulated handling time per operation

    @field_validator("total_slots")
    @classmethod
    def check_total_slots(cls, v: int) -> int:
        if v < 1:
            raise ValueError("total_slots must be at least 1")
        return v

    @field_validator("processing_delay_seconds")
    @classmethod
    def check_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("processing_delay_seconds must not be negative")
        return v

    @field_validator("whitelist", mode="before")
    @classmethod
    def resolve_env_vars(cls, v: list) -> list:
        """Resolve environment variable references like ${VAR_NAME} and drop duplicates."""
        if v is None:
            return []
        plates = []
        for item in v:
            if isinstance(item, str) and item.startswith("${") and item.endswith("}"):
                item = os.environ.get(item[2:-1], "")
            if not isinstance(item, str) or not item.strip():
                raise ValueError("Whitelist entries must be non-empty plate numbers")
            item = item.strip()
            if item not in plates:
                plates.append(item)
        return plates


class NotificationConfig(BaseModel):
    """Availability channel configuration."""

    overflow: OverflowPolicy = OverflowPolicy.DROP_OLDEST
    buffer_size: int = 100  # Pending counts kept per subscriber with drop_oldest

    @field_validator("buffer_size")
    @classmethod
    def check_buffer_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("buffer_size must be at least 1")
        return v


class APIConfig(BaseModel):
    """API server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"


class AppConfig(BaseModel):
    """Main application configuration."""

    lot: LotConfig = LotConfig()
    notifications: NotificationConfig = NotificationConfig()
    api: APIConfig = APIConfig()
    logging: LoggingConfig = LoggingConfig()


def load_config(path: str | Path) -> AppConfig:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to the configuration file

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    config_path = Path(path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    return AppConfig(**data)


def get_config_path() -> Path:
    """Get the default configuration file path."""
    # Check for config in current directory first
    local_config = Path("config/config.yaml")
    if local_config.exists():
        return local_config

    # Check for config in parent directory (for Docker)
    parent_config = Path("/app/config/config.yaml")
    if parent_config.exists():
        return parent_config

    return local_config  # Return default even if doesn't exist
