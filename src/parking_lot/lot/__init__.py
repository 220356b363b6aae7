"""Parking core: vehicles, tickets, slot allocation and availability events."""

from .errors import (
    ChannelClosedError,
    InternalConsistencyError,
    ManagerClosedError,
    ParkingError,
    ParkingInternalError,
    TicketAlreadyCompletedError,
    TicketNotCompletedError,
)
from .manager import ParkingManager
from .models import AdmissionStatus, SlotStatus, Ticket, Vehicle, VehicleType
from .notifications import AvailabilityChannel, AvailabilitySubscription, OverflowPolicy

__all__ = [
    "AdmissionStatus",
    "AvailabilityChannel",
    "AvailabilitySubscription",
    "ChannelClosedError",
    "InternalConsistencyError",
    "ManagerClosedError",
    "OverflowPolicy",
    "ParkingError",
    "ParkingInternalError",
    "ParkingManager",
    "SlotStatus",
    "Ticket",
    "TicketAlreadyCompletedError",
    "TicketNotCompletedError",
    "Vehicle",
    "VehicleType",
]
