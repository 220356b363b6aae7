"""Text console for the parking lot."""

from .facade import ParkingFacade, TransactionKind, TransactionLog, TransactionRecord, logging_sink
from .menu import run_menu

__all__ = [
    "ParkingFacade",
    "TransactionKind",
    "TransactionLog",
    "TransactionRecord",
    "logging_sink",
    "run_menu",
]
