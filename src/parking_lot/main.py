"""Main application entry point."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from .api.router import init_router, router
from .config import LOG_FORMAT, AppConfig, get_config_path, load_config
from .lot.manager import ParkingManager
from .lot.notifications import AvailabilitySubscription

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
)
logger = logging.getLogger(__name__)

# Global state
parking_manager: Optional[ParkingManager] = None
availability_task: Optional[asyncio.Task] = None
config: Optional[AppConfig] = None


def configure_logging(cfg: AppConfig) -> None:
    """Apply the configured level to the root logger."""
    logging.getLogger().setLevel(cfg.logging.level.upper())


def load_app_config() -> AppConfig:
    """Load config/config.yaml, falling back to defaults when it is missing."""
    config_path = get_config_path()
    if not config_path.exists():
        logger.warning(f"Configuration file not found: {config_path}, using defaults")
        return AppConfig()

    cfg = load_config(config_path)
    logger.info(f"Loaded configuration from {config_path}")
    return cfg


async def log_availability(subscription: AvailabilitySubscription, total_slots: int) -> None:
    """
    Log every availability change until the feed ends.

    Args:
        subscription: Subscription on the manager's availability channel
        total_slots: Lot capacity, for the log message
    """
    logger.info("Starting availability logger")

    async for available in subscription:
        if available == 0:
            logger.warning(f"Lot full: 0/{total_slots} slots available")
        else:
            logger.info(f"Availability: {available}/{total_slots} slots")

    if subscription.dropped:
        logger.warning(f"Availability logger missed {subscription.dropped} update(s)")
    logger.info("Availability feed closed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global parking_manager, availability_task, config

    config = load_app_config()
    configure_logging(config)

    logger.info("Starting Parking Lot Manager...")

    parking_manager = ParkingManager.from_config(config)
    init_router(parking_manager)

    availability_task = asyncio.create_task(
        log_availability(parking_manager.subscribe(), parking_manager.total_slot_count())
    )

    logger.info(f"Parking Lot Manager ready on http://{config.api.host}:{config.api.port}")

    yield  # Application runs here

    # Shutdown
    logger.info("Shutting down...")

    # Closing the channel ends the availability logger
    parking_manager.dispose()

    if availability_task:
        try:
            await asyncio.wait_for(availability_task, timeout=5)
        except asyncio.TimeoutError:
            availability_task.cancel()

    logger.info("Shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Parking Lot Manager",
    description="API for parking vehicles, issuing tickets and tracking slot availability",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(router, prefix="/api/v1")


def main():
    """Run the application."""
    # Load config just to get API settings
    config_path = get_config_path()
    if config_path.exists():
        cfg = load_config(config_path)
        host = cfg.api.host
        port = cfg.api.port
    else:
        host = "0.0.0.0"
        port = 8000

    uvicorn.run(
        "parking_lot.main:app",
        host=host,
        port=port,
        reload=False,
    )


if __name__ == "__main__":
    main()
