"""Shared fixtures for the parking lot tests."""

from datetime import datetime, timedelta

import pytest

from parking_lot.lot.manager import ParkingManager
from parking_lot.lot.models import Vehicle, VehicleType

BASE_TIME = datetime(2026, 3, 2, 9, 0, 0)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime = BASE_TIME):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def make_vehicle(plate="ABC123", vehicle_type=VehicleType.CAR, entry_time=BASE_TIME):
    return Vehicle(plate_number=plate, vehicle_type=vehicle_type, entry_time=entry_time)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manager(clock):
    mgr = ParkingManager(total_slots=4, processing_delay=0, clock=clock)
    yield mgr
    mgr.dispose()
