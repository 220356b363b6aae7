"""Interactive text menu for the parking lot."""

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

from ..config import LOG_FORMAT, AppConfig, LotConfig, get_config_path, load_config
from ..lot.manager import ParkingManager
from ..lot.models import VehicleType
from .facade import ParkingFacade, logging_sink

logger = logging.getLogger(__name__)

MENU = """
=== Parking Lot ===
1. Park vehicle
2. Check availability
3. Retrieve vehicle
4. View transaction log
5. Exit"""

# Menu choices for vehicle categories, by number or name
VEHICLE_CHOICES = {
    "1": VehicleType.CAR,
    "2": VehicleType.MOTORCYCLE,
    "3": VehicleType.TRUCK,
    "car": VehicleType.CAR,
    "motorcycle": VehicleType.MOTORCYCLE,
    "truck": VehicleType.TRUCK,
}


def parse_vehicle_type(text: str) -> Optional[VehicleType]:
    """Map a menu answer like '2' or 'Truck' to a vehicle type."""
    return VEHICLE_CHOICES.get(text.strip().lower())


async def run_menu(
    facade: ParkingFacade,
    input_func: Callable[[str], str] = input,
    output: Callable[[str], None] = print,
) -> None:
    """
    Run the menu loop until the user exits or input ends.

    Args:
        facade: Facade wrapping the parking manager
        input_func: Reads one line given a prompt
        output: Writes one block of text
    """
    while True:
        output(MENU)
        try:
            choice = input_func("Select an option: ").strip()
        except EOFError:
            break

        if choice == "1":
            vehicle_type = parse_vehicle_type(
                input_func("Vehicle type (1=Car, 2=Motorcycle, 3=Truck): ")
            )
            if vehicle_type is None:
                output("Invalid vehicle type.")
                continue
            plate = input_func("Plate number: ").strip()
            if not plate:
                output("Plate number must not be empty.")
                continue
            _, message = await facade.park(vehicle_type, plate)
            output(message)

        elif choice == "2":
            output(facade.availability_report())

        elif choice == "3":
            plate = input_func("Plate number: ").strip()
            if not plate:
                output("Plate number must not be empty.")
                continue
            _, message = await facade.retrieve(plate)
            output(message)

        elif choice == "4":
            output(facade.log_report())

        elif choice == "5":
            output("Goodbye.")
            break

        else:
            output("Invalid option, choose 1-5.")


def build_config(args: argparse.Namespace) -> AppConfig:
    """Load the config file and apply command-line overrides."""
    config_path = Path(args.config) if args.config else get_config_path()
    cfg = load_config(config_path) if config_path.exists() else AppConfig()

    lot = cfg.lot.model_dump()
    if args.slots is not None:
        lot["total_slots"] = args.slots
    if args.whitelist:
        lot["whitelist"] = args.whitelist
    if args.delay is not None:
        lot["processing_delay_seconds"] = args.delay

    return cfg.model_copy(update={"lot": LotConfig(**lot)})


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Parking lot console")
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("--slots", type=int, help="Total number of slots")
    parser.add_argument(
        "--whitelist",
        action="append",
        metavar="PLATE",
        help="Whitelisted plate (repeatable); omit to admit every plate",
    )
    parser.add_argument("--delay", type=float, help="Processing delay in seconds")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for the parking lot console."""
    args = parse_args(argv)
    cfg = build_config(args)

    logging.basicConfig(level=cfg.logging.level.upper(), format=LOG_FORMAT)

    manager = ParkingManager.from_config(cfg)
    facade = ParkingFacade(manager, sink=logging_sink)

    try:
        asyncio.run(run_menu(facade))
    except KeyboardInterrupt:
        print()
    finally:
        manager.dispose()


if __name__ == "__main__":
    main()
