"""Data models for vehicles, tickets and slot state."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from .errors import TicketAlreadyCompletedError, TicketNotCompletedError

SECONDS_PER_HOUR = 3600.0


class VehicleType(str, Enum):
    """Category of a vehicle."""

    CAR = "car"
    MOTORCYCLE = "motorcycle"
    TRUCK = "truck"

    @property
    def base_rate(self) -> float:
        """Hourly base rate for this category."""
        return BASE_RATES[self]


# Hourly rates, one per category
BASE_RATES: dict[VehicleType, float] = {
    VehicleType.CAR: 10.0,
    VehicleType.MOTORCYCLE: 5.0,
    VehicleType.TRUCK: 15.0,
}


class SlotStatus(str, Enum):
    """Status of a parking slot."""

    AVAILABLE = "available"
    OCCUPIED = "occupied"


class AdmissionStatus(str, Enum):
    """Outcome of an admission check for a plate."""

    ADMITTED = "admitted"
    NOT_WHITELISTED = "not_whitelisted"
    LOT_FULL = "lot_full"
    ALREADY_PARKED = "already_parked"


@dataclass(frozen=True)
class Vehicle:
    """A vehicle entering the lot. Entry time is fixed at construction."""

    plate_number: str
    vehicle_type: VehicleType
    entry_time: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not self.plate_number or not self.plate_number.strip():
            raise ValueError("Plate number must not be empty")

    @property
    def base_rate(self) -> float:
        return self.vehicle_type.base_rate

    def fee_for(self, exit_time: datetime) -> float:
        """
        Calculate the parking fee for a stay ending at exit_time.

        Stays shorter than an hour are billed as one full hour.

        Raises:
            ValueError: If exit_time is before the entry time
        """
        if exit_time < self.entry_time:
            raise ValueError(
                f"Exit time {exit_time} is before entry time {self.entry_time}"
            )
        hours = (exit_time - self.entry_time).total_seconds() / SECONDS_PER_HOUR
        return self.base_rate * max(1.0, hours)

    def __str__(self) -> str:
        return f"{self.vehicle_type.name} - {self.plate_number}"


@dataclass
class Ticket:
    """A parking session, open until completed on retrieval."""

    id: str
    vehicle: Vehicle
    slot_number: int  # 1-based
    entry_time: datetime
    exit_time: Optional[datetime] = None
    fee: Optional[float] = None

    def __post_init__(self):
        if (self.exit_time is None) != (self.fee is None):
            raise ValueError(f"Ticket {self.id} must set exit_time and fee together")

    @property
    def plate_number(self) -> str:
        return self.vehicle.plate_number

    @property
    def is_completed(self) -> bool:
        return self.exit_time is not None and self.fee is not None

    @property
    def duration_hours(self) -> Optional[float]:
        """Length of the stay in hours, or None while the ticket is open."""
        if self.exit_time is None:
            return None
        return (self.exit_time - self.entry_time).total_seconds() / SECONDS_PER_HOUR

    def complete(self, exit_time: datetime, fee: float) -> None:
        """
        Close the ticket.

        Raises:
            ValueError: If exit_time or fee is missing
            TicketAlreadyCompletedError: If the ticket was already closed
        """
        if exit_time is None or fee is None:
            raise ValueError("Completing a ticket requires both exit_time and fee")
        if self.is_completed:
            raise TicketAlreadyCompletedError(f"Ticket {self.id} is already completed")
        self.exit_time = exit_time
        self.fee = fee

    def render_receipt(self) -> str:
        """
        Format a receipt for a completed ticket.

        Raises:
            TicketNotCompletedError: If the ticket is still open
        """
        if not self.is_completed:
            raise TicketNotCompletedError(
                f"Ticket {self.id} has no receipt until the vehicle is retrieved"
            )

        lines = [
            "=" * 36,
            "          PARKING RECEIPT",
            "=" * 36,
            f"Ticket:   {self.id}",
            f"Vehicle:  {self.vehicle}",
            f"Slot:     {self.slot_number}",
            f"Entry:    {self.entry_time:%Y-%m-%d %H:%M:%S}",
            f"Exit:     {self.exit_time:%Y-%m-%d %H:%M:%S}",
            f"Duration: {self.duration_hours:.1f} hours",
            f"Fee:      {self.fee:.2f}",
            "=" * 36,
        ]
        return "\n".join(lines)
