"""FastAPI route definitions."""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Response

from ..lot.manager import ParkingManager
from ..lot.models import AdmissionStatus
from ..metrics import get_metrics
from .schemas import (
    HealthResponse,
    ParkRequest,
    SlotResponse,
    StatusResponse,
    TicketResponse,
    WhitelistRequest,
    WhitelistResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Dependencies injected at startup
_manager: Optional[ParkingManager] = None
_start_time: datetime = datetime.now()

# HTTP status for each park rejection
_REJECTION_CODES = {
    AdmissionStatus.NOT_WHITELISTED: 403,
    AdmissionStatus.ALREADY_PARKED: 409,
    AdmissionStatus.LOT_FULL: 409,
}


def init_router(manager: ParkingManager) -> None:
    """
    Initialize router with dependencies.

    Args:
        manager: ParkingManager instance serving the requests
    """
    global _manager, _start_time

    _manager = manager
    _start_time = datetime.now()

    logger.info("API router initialized")


def _require_manager() -> ParkingManager:
    if _manager is None or _manager.closed:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return _manager


def _whitelist_response(manager: ParkingManager) -> WhitelistResponse:
    plates = sorted(manager.whitelist())
    return WhitelistResponse(plates=plates, admits_all=not plates)


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns basic health information about the service.
    """
    uptime = (datetime.now() - _start_time).total_seconds()

    return HealthResponse(
        status="healthy",
        manager_running=_manager is not None and not _manager.closed,
        uptime_seconds=uptime,
    )


@router.get("/status", response_model=StatusResponse)
async def get_status() -> StatusResponse:
    """
    Get overall lot status.

    Returns availability counts and the state of every slot.
    """
    manager = _require_manager()

    statuses = manager.status_by_display_slot()
    occupants = manager.occupants_by_display_slot()

    slots = [
        SlotResponse(
            slot_number=number,
            status=status,
            plate_number=occupants[number].plate_number if occupants[number] else None,
            vehicle_type=occupants[number].vehicle_type if occupants[number] else None,
        )
        for number, status in statuses.items()
    ]

    return StatusResponse(
        total_slots=manager.total_slot_count(),
        available=manager.available_slot_count(),
        occupied=manager.occupied_slot_count(),
        slots=slots,
    )


@router.post("/park", response_model=TicketResponse, status_code=201)
async def park_vehicle(request: ParkRequest) -> TicketResponse:
    """
    Park a vehicle in the first free slot.

    Responds 403 if the plate is not whitelisted and 409 if the lot is
    full or the plate is already parked.
    """
    manager = _require_manager()

    vehicle = manager.vehicle(request.plate_number, request.vehicle_type)
    ticket = await manager.park(vehicle)

    if ticket is None:
        reason = manager.admission_status(vehicle.plate_number)
        code = _REJECTION_CODES.get(reason, 409)
        raise HTTPException(status_code=code, detail=f"Cannot park {vehicle.plate_number}: {reason.value}")

    return TicketResponse.from_ticket(ticket)


@router.post("/retrieve/{plate_number}", response_model=TicketResponse)
async def retrieve_vehicle(plate_number: str) -> TicketResponse:
    """
    Retrieve a parked vehicle.

    Returns the completed ticket including the fee and receipt text.
    """
    manager = _require_manager()

    ticket = await manager.retrieve(plate_number)
    if ticket is None:
        raise HTTPException(status_code=404, detail=f"Vehicle '{plate_number}' is not parked")

    return TicketResponse.from_ticket(ticket)


@router.get("/tickets/active", response_model=list[TicketResponse])
async def list_active_tickets() -> list[TicketResponse]:
    """List open tickets ordered by slot number."""
    manager = _require_manager()
    tickets = sorted(manager.active_tickets().values(), key=lambda t: t.slot_number)
    return [TicketResponse.from_ticket(t) for t in tickets]


@router.get("/tickets/completed", response_model=list[TicketResponse])
async def list_completed_tickets() -> list[TicketResponse]:
    """List completed tickets in the order they were closed."""
    manager = _require_manager()
    return [TicketResponse.from_ticket(t) for t in manager.completed_tickets()]


@router.get("/whitelist", response_model=WhitelistResponse)
async def get_whitelist() -> WhitelistResponse:
    """Get the current whitelist."""
    return _whitelist_response(_require_manager())


@router.post("/whitelist", response_model=WhitelistResponse)
async def add_to_whitelist(request: WhitelistRequest) -> WhitelistResponse:
    """
    Add a plate to the whitelist.

    Once the whitelist is non-empty only listed plates may park.
    """
    manager = _require_manager()
    manager.add_to_whitelist(request.plate_number)
    return _whitelist_response(manager)


@router.delete("/whitelist/{plate_number}", response_model=WhitelistResponse)
async def remove_from_whitelist(plate_number: str) -> WhitelistResponse:
    """Remove a plate from the whitelist."""
    manager = _require_manager()
    if not manager.remove_from_whitelist(plate_number):
        raise HTTPException(status_code=404, detail=f"Plate '{plate_number}' is not whitelisted")
    return _whitelist_response(manager)


@router.get("/metrics")
async def prometheus_metrics() -> Response:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format including:
    - parking_slots_total / parking_slots_available / parking_slots_occupied
    - parking_vehicles_parked_total and parking_vehicles_retrieved_total by vehicle type
    - parking_rejections_total by operation and reason
    - parking_fee and parking_duration_hours histograms
    """
    return Response(
        content=get_metrics(),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
