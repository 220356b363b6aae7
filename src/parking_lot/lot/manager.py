"""Slot allocation and ticket lifecycle."""

import asyncio
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Iterable, Optional

from ..metrics import record_park, record_rejection, record_retrieval, update_slot_counts
from .errors import InternalConsistencyError, ManagerClosedError
from .models import AdmissionStatus, SlotStatus, Ticket, Vehicle, VehicleType
from .notifications import AvailabilityChannel, AvailabilitySubscription

if TYPE_CHECKING:
    from ..config import AppConfig

logger = logging.getLogger(__name__)


class ParkingManager:
    """
    Owns the slot table, open tickets, ticket history and whitelist.

    Vehicles are placed in the lowest-numbered free slot. park() and
    retrieve() return None for every ordinary rejection; exceptions are
    reserved for broken invariants and use after dispose().

    Both operations wait for the processing delay outside the lock and
    re-check everything before committing, so overlapping calls never
    share a slot or retrieve the same plate twice.
    """

    def __init__(
        self,
        total_slots: int,
        whitelist: Optional[Iterable[str]] = None,
        processing_delay: float = 1.0,
        channel: Optional[AvailabilityChannel] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the parking manager.

        Args:
            total_slots: Number of slots, fixed for the manager's lifetime
            whitelist: Plates allowed to park; empty admits every plate
            processing_delay: Seconds spent handling each park or retrieve
            channel: Availability channel to publish on (a default one is created)
            clock: Source of the current time, used for entry and exit timestamps
        """
        if total_slots < 1:
            raise ValueError("total_slots must be at least 1")
        if processing_delay < 0:
            raise ValueError("processing_delay must not be negative")

        self.processing_delay = processing_delay
        self._clock = clock
        self._slots: list[Optional[Vehicle]] = [None] * total_slots
        self._active: dict[str, Ticket] = {}  # plate -> open ticket
        self._completed: list[Ticket] = []
        self._whitelist: set[str] = {_normalize_plate(p) for p in whitelist or ()}
        self._channel = channel or AvailabilityChannel()
        self._lock = asyncio.Lock()
        self._sequence = 0
        self._closed = False

        self._update_gauges()
        logger.info(
            f"Initialized ParkingManager with {total_slots} slots "
            f"({len(self._whitelist)} whitelisted plates)"
        )

    @classmethod
    def from_config(cls, config: "AppConfig", clock: Callable[[], datetime] = datetime.now) -> "ParkingManager":
        """Build a manager from an AppConfig."""
        channel = AvailabilityChannel(
            overflow=config.notifications.overflow,
            buffer_size=config.notifications.buffer_size,
        )
        return cls(
            total_slots=config.lot.total_slots,
            whitelist=config.lot.whitelist,
            processing_delay=config.lot.processing_delay_seconds,
            channel=channel,
            clock=clock,
        )

    def now(self) -> datetime:
        """Current time according to the manager's clock."""
        return self._clock()

    def vehicle(self, plate: str, vehicle_type: VehicleType) -> Vehicle:
        """Create a vehicle whose entry time comes from the manager's clock."""
        return Vehicle(plate_number=plate, vehicle_type=vehicle_type, entry_time=self._clock())

    # -- queries ---------------------------------------------------------

    def is_whitelisted(self, plate: str) -> bool:
        """True if the whitelist is empty or contains the plate."""
        return not self._whitelist or plate in self._whitelist

    def admission_status(self, plate: str) -> AdmissionStatus:
        """Explain whether a plate could park right now."""
        if not self.is_whitelisted(plate):
            return AdmissionStatus.NOT_WHITELISTED
        if plate in self._active:
            return AdmissionStatus.ALREADY_PARKED
        if self._first_free_index() is None:
            return AdmissionStatus.LOT_FULL
        return AdmissionStatus.ADMITTED

    def total_slot_count(self) -> int:
        return len(self._slots)

    def available_slot_count(self) -> int:
        """Get count of free slots."""
        return sum(1 for v in self._slots if v is None)

    def occupied_slot_count(self) -> int:
        """Get count of occupied slots."""
        return len(self._slots) - self.available_slot_count()

    def status_by_display_slot(self) -> dict[int, SlotStatus]:
        """Map every 1-based slot number to its status."""
        return {
            index + 1: SlotStatus.AVAILABLE if vehicle is None else SlotStatus.OCCUPIED
            for index, vehicle in enumerate(self._slots)
        }

    def occupants_by_display_slot(self) -> dict[int, Optional[Vehicle]]:
        """Map every 1-based slot number to the vehicle in it, if any."""
        return {index + 1: vehicle for index, vehicle in enumerate(self._slots)}

    def completed_tickets(self) -> tuple[Ticket, ...]:
        """Completed tickets in the order they were closed."""
        return tuple(self._completed)

    def active_tickets(self) -> dict[str, Ticket]:
        """Snapshot of open tickets keyed by plate."""
        return dict(self._active)

    def whitelist(self) -> frozenset[str]:
        return frozenset(self._whitelist)

    # -- whitelist -------------------------------------------------------

    def add_to_whitelist(self, plate: str) -> None:
        """Allow a plate to park. Adding a listed plate is a no-op."""
        plate = _normalize_plate(plate)
        if plate not in self._whitelist:
            self._whitelist.add(plate)
            logger.info(f"Added {plate} to whitelist")

    def remove_from_whitelist(self, plate: str) -> bool:
        """Remove a plate from the whitelist. Returns False if it was not listed."""
        plate = plate.strip()
        if plate not in self._whitelist:
            return False
        self._whitelist.discard(plate)
        logger.info(f"Removed {plate} from whitelist")
        return True

    # -- notifications ---------------------------------------------------

    def subscribe(self) -> AvailabilitySubscription:
        """Subscribe to free-slot counts published after each park and retrieve."""
        return self._channel.subscribe()

    @property
    def closed(self) -> bool:
        return self._closed

    def dispose(self) -> None:
        """Close the availability channel and refuse further operations."""
        if self._closed:
            return
        self._closed = True
        self._channel.close()
        logger.info("ParkingManager disposed")

    # -- operations ------------------------------------------------------

    async def park(self, vehicle: Vehicle) -> Optional[Ticket]:
        """
        Park a vehicle in the first free slot.

        Args:
            vehicle: The arriving vehicle

        Returns:
            The new open ticket, or None if the plate is not whitelisted,
            is already parked, or the lot is full
        """
        self._ensure_open()
        plate = vehicle.plate_number

        async with self._lock:
            status = self.admission_status(plate)
        if status != AdmissionStatus.ADMITTED:
            self._reject("park", plate, status.value)
            return None

        await self._process("park", plate)

        async with self._lock:
            self._ensure_open()
            status = self.admission_status(plate)
            if status != AdmissionStatus.ADMITTED:
                self._reject("park", plate, status.value)
                return None

            index = self._first_free_index()
            self._slots[index] = vehicle
            ticket = Ticket(
                id=self._next_ticket_id(vehicle),
                vehicle=vehicle,
                slot_number=index + 1,
                entry_time=vehicle.entry_time,
            )
            self._active[plate] = ticket
            self._channel.publish(self.available_slot_count())

        logger.info(f"Parked {vehicle} in slot {ticket.slot_number} (ticket {ticket.id})")
        record_park(vehicle.vehicle_type.value)
        self._update_gauges()
        return ticket

    async def retrieve(self, plate: str) -> Optional[Ticket]:
        """
        Retrieve a parked vehicle and close its ticket.

        Args:
            plate: Plate number of the parked vehicle

        Returns:
            The completed ticket, or None if no vehicle with that plate is parked

        Raises:
            InternalConsistencyError: If the plate has an open ticket but no slot
        """
        self._ensure_open()

        async with self._lock:
            found = plate in self._active
        if not found:
            self._reject("retrieve", plate, "not_parked")
            return None

        await self._process("retrieve", plate)

        async with self._lock:
            self._ensure_open()
            ticket = self._active.get(plate)
            if ticket is None:
                # Retrieved by an overlapping call during the delay
                self._reject("retrieve", plate, "not_parked")
                return None

            index = self._slot_index_of(plate)
            if index is None:
                raise InternalConsistencyError(
                    f"Ticket {ticket.id} is open but {plate} occupies no slot"
                )

            vehicle = ticket.vehicle
            exit_time = max(self._clock(), vehicle.entry_time)
            fee = vehicle.fee_for(exit_time)
            ticket.complete(exit_time, fee)

            self._slots[index] = None
            del self._active[plate]
            self._completed.append(ticket)
            self._channel.publish(self.available_slot_count())

        logger.info(
            f"Retrieved {vehicle} from slot {ticket.slot_number}: "
            f"{ticket.duration_hours:.1f}h, fee {fee:.2f}"
        )
        record_retrieval(vehicle.vehicle_type.value, fee, ticket.duration_hours)
        self._update_gauges()
        return ticket

    # -- internals -------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise ManagerClosedError("ParkingManager has been disposed")

    async def _process(self, operation: str, plate: str) -> None:
        if self.processing_delay > 0:
            logger.debug(f"Processing {operation} for {plate} ({self.processing_delay}s)")
            await asyncio.sleep(self.processing_delay)

    def _first_free_index(self) -> Optional[int]:
        for index, vehicle in enumerate(self._slots):
            if vehicle is None:
                return index
        return None

    def _slot_index_of(self, plate: str) -> Optional[int]:
        for index, vehicle in enumerate(self._slots):
            if vehicle is not None and vehicle.plate_number == plate:
                return index
        return None

    def _next_ticket_id(self, vehicle: Vehicle) -> str:
        self._sequence += 1
        issued = self._clock()
        return f"{vehicle.vehicle_type.name[0]}{issued:%Y%m%d%H%M%S}-{self._sequence:04d}"

    def _reject(self, operation: str, plate: str, reason: str) -> None:
        logger.info(f"Rejected {operation} for {plate}: {reason}")
        record_rejection(operation, reason)

    def _update_gauges(self) -> None:
        update_slot_counts(
            total=self.total_slot_count(),
            available=self.available_slot_count(),
            occupied=self.occupied_slot_count(),
        )


def _normalize_plate(plate: str) -> str:
    """Strip surrounding whitespace, rejecting blank plates."""
    plate = plate.strip() if plate else ""
    if not plate:
        raise ValueError("Plate number must not be empty")
    return plate
