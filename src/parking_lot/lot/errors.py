"""Exceptions raised by the parking core.

Ordinary rejections (not whitelisted, lot full, plate not parked) are
returned as None and never raised.
"""


class ParkingError(Exception):
    """Base class for parking core errors."""


class TicketNotCompletedError(ParkingError):
    """A receipt was requested for a ticket that is still open."""


class ManagerClosedError(ParkingError):
    """The manager was used after dispose()."""


class ChannelClosedError(ParkingError):
    """An event was published on a closed availability channel."""


class ParkingInternalError(ParkingError):
    """A broken invariant inside the core. Never caused by user input."""


class TicketAlreadyCompletedError(ParkingInternalError):
    """A ticket was completed twice."""


class InternalConsistencyError(ParkingInternalError):
    """The active-ticket index and the slot table disagree."""
