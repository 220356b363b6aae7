"""Parking lot manager: slot allocation, tickets, fees and live availability."""

__version__ = "1.0.0"
