"""Console-facing wrapper around the parking manager with a transaction log."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from ..lot.manager import ParkingManager
from ..lot.models import AdmissionStatus, SlotStatus, Ticket, VehicleType

logger = logging.getLogger(__name__)


class TransactionKind(str, Enum):
    """Kind of console transaction."""

    PARKED = "parked"
    PARK_REJECTED = "park_rejected"
    RETRIEVED = "retrieved"
    RETRIEVE_FAILED = "retrieve_failed"


@dataclass(frozen=True)
class TransactionRecord:
    """One entry in the transaction log."""

    kind: TransactionKind
    plate_number: str
    timestamp: datetime
    slot_number: Optional[int] = None
    fee: Optional[float] = None
    detail: str = ""

    def __str__(self) -> str:
        parts = [f"[{self.timestamp:%Y-%m-%d %H:%M:%S}]", self.kind.value.upper(), self.plate_number]
        if self.slot_number is not None:
            parts.append(f"slot {self.slot_number}")
        if self.fee is not None:
            parts.append(f"fee {self.fee:.2f}")
        if self.detail:
            parts.append(f"({self.detail})")
        return " ".join(parts)


TransactionSink = Callable[[TransactionRecord], None]


@dataclass
class TransactionLog:
    """In-memory sink keeping records in arrival order."""

    records: list[TransactionRecord] = field(default_factory=list)

    def __call__(self, record: TransactionRecord) -> None:
        self.records.append(record)

    def __len__(self) -> int:
        return len(self.records)


def logging_sink(record: TransactionRecord) -> None:
    """Sink writing each record to the module logger."""
    logger.info(f"Transaction: {record}")


class ParkingFacade:
    """
    Presentation wrapper used by the text menu.

    Every park and retrieve produces one TransactionRecord, which is kept
    in ``log`` and passed to the optional extra sink.
    """

    def __init__(
        self,
        manager: ParkingManager,
        sink: Optional[TransactionSink] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.manager = manager
        self.log = TransactionLog()
        self._sink = sink
        self._clock = clock or manager.now

    def _record(self, kind: TransactionKind, plate: str, **kwargs) -> TransactionRecord:
        record = TransactionRecord(kind=kind, plate_number=plate, timestamp=self._clock(), **kwargs)
        self.log(record)
        if self._sink is not None:
            self._sink(record)
        return record

    async def park(self, vehicle_type: VehicleType, plate: str) -> tuple[Optional[Ticket], str]:
        """
        Park a vehicle and describe the outcome.

        Returns:
            (ticket or None, message for the user)
        """
        vehicle = self.manager.vehicle(plate, vehicle_type)
        ticket = await self.manager.park(vehicle)

        if ticket is None:
            reason = self.manager.admission_status(plate)
            message = describe_rejection(plate, reason)
            self._record(TransactionKind.PARK_REJECTED, plate, detail=reason.value)
            return None, message

        self._record(TransactionKind.PARKED, plate, slot_number=ticket.slot_number)
        return ticket, f"{vehicle} parked in slot {ticket.slot_number}. Ticket: {ticket.id}"

    async def retrieve(self, plate: str) -> tuple[Optional[Ticket], str]:
        """
        Retrieve a vehicle.

        Returns:
            (completed ticket or None, receipt or message for the user)
        """
        ticket = await self.manager.retrieve(plate)

        if ticket is None:
            self._record(TransactionKind.RETRIEVE_FAILED, plate, detail="not parked")
            return None, f"No parked vehicle with plate {plate}."

        self._record(
            TransactionKind.RETRIEVED,
            plate,
            slot_number=ticket.slot_number,
            fee=ticket.fee,
        )
        return ticket, ticket.render_receipt()

    def availability_report(self) -> str:
        """Counts plus one line per slot."""
        manager = self.manager
        lines = [
            f"Available slots: {manager.available_slot_count()}/{manager.total_slot_count()}",
        ]
        occupants = manager.occupants_by_display_slot()
        for number, status in manager.status_by_display_slot().items():
            if status == SlotStatus.OCCUPIED:
                lines.append(f"  Slot {number}: occupied by {occupants[number]}")
            else:
                lines.append(f"  Slot {number}: available")
        return "\n".join(lines)

    def log_report(self) -> str:
        """Transaction log, one record per line."""
        if not self.log.records:
            return "No transactions yet."
        return "\n".join(str(record) for record in self.log.records)


def describe_rejection(plate: str, reason: AdmissionStatus) -> str:
    """User-facing explanation of a failed park."""
    if reason == AdmissionStatus.NOT_WHITELISTED:
        return f"Plate {plate} is not whitelisted."
    if reason == AdmissionStatus.ALREADY_PARKED:
        return f"Plate {plate} is already parked."
    if reason == AdmissionStatus.LOT_FULL:
        return "Parking lot is full."
    return f"Could not park {plate}, please try again."
