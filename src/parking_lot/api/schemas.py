"""API request and response schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ..lot.models import SlotStatus, Ticket, VehicleType


class ParkRequest(BaseModel):
    """Request body for parking a vehicle."""

    plate_number: str
    vehicle_type: VehicleType

    @field_validator("plate_number")
    @classmethod
    def check_plate(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("plate_number must not be empty")
        return v


class WhitelistRequest(BaseModel):
    """Request body for whitelisting a plate."""

    plate_number: str

    @field_validator("plate_number")
    @classmethod
    def check_plate(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("plate_number must not be empty")
        return v


class TicketResponse(BaseModel):
    """Response schema for a ticket, open or completed."""

    id: str
    plate_number: str
    vehicle_type: VehicleType
    slot_number: int
    entry_time: datetime
    exit_time: Optional[datetime] = None
    duration_hours: Optional[float] = None
    fee: Optional[float] = None
    receipt: Optional[str] = None

    @classmethod
    def from_ticket(cls, ticket: Ticket) -> "TicketResponse":
        return cls(
            id=ticket.id,
            plate_number=ticket.plate_number,
            vehicle_type=ticket.vehicle.vehicle_type,
            slot_number=ticket.slot_number,
            entry_time=ticket.entry_time,
            exit_time=ticket.exit_time,
            duration_hours=ticket.duration_hours,
            fee=ticket.fee,
            receipt=ticket.render_receipt() if ticket.is_completed else None,
        )


class SlotResponse(BaseModel):
    """Response schema for a single parking slot."""

    slot_number: int
    status: SlotStatus
    plate_number: Optional[str] = None
    vehicle_type: Optional[VehicleType] = None


class StatusResponse(BaseModel):
    """Response schema for overall lot status."""

    total_slots: int
    available: int
    occupied: int
    slots: list[SlotResponse]


class WhitelistResponse(BaseModel):
    """Current whitelist. Empty means every plate is admitted."""

    plates: list[str]
    admits_all: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    manager_running: bool
    uptime_seconds: float
