"""Tests for the console facade and menu."""

from unittest.mock import MagicMock

import pytest

from parking_lot.config import LotConfig
from parking_lot.console.facade import ParkingFacade, TransactionKind, TransactionRecord
from parking_lot.console.menu import build_config, parse_args, parse_vehicle_type, run_menu
from parking_lot.lot.manager import ParkingManager
from parking_lot.lot.models import VehicleType

from conftest import BASE_TIME, FakeClock


def make_facade(slots=2, sink=None, clock=None):
    clock = clock or FakeClock()
    manager = ParkingManager(total_slots=slots, processing_delay=0, clock=clock)
    return ParkingFacade(manager, sink=sink, clock=clock)


def scripted_input(*answers):
    answers = iter(answers)

    def read(prompt):
        try:
            return next(answers)
        except StopIteration:
            raise EOFError

    return read


class TestParkingFacade:
    @pytest.mark.asyncio
    async def test_park_records_transaction(self):
        sink = MagicMock()
        facade = make_facade(sink=sink)

        ticket, message = await facade.park(VehicleType.CAR, "ABC123")

        assert ticket.slot_number == 1
        assert "CAR - ABC123 parked in slot 1" in message
        record = facade.log.records[0]
        assert record.kind == TransactionKind.PARKED
        assert record.slot_number == 1
        sink.assert_called_once_with(record)

    @pytest.mark.asyncio
    async def test_rejection_messages(self):
        facade = make_facade(slots=1)
        await facade.park(VehicleType.CAR, "A1")

        _, full = await facade.park(VehicleType.CAR, "A2")
        _, duplicate = await facade.park(VehicleType.CAR, "A1")
        facade.manager.add_to_whitelist("VIP1")
        _, denied = await facade.park(VehicleType.CAR, "A3")

        assert full == "Parking lot is full."
        assert duplicate == "Plate A1 is already parked."
        assert denied == "Plate A3 is not whitelisted."
        details = [r.detail for r in facade.log.records if r.kind == TransactionKind.PARK_REJECTED]
        assert details == ["lot_full", "already_parked", "not_whitelisted"]

    @pytest.mark.asyncio
    async def test_retrieve_returns_receipt(self):
        clock = FakeClock()
        facade = make_facade(clock=clock)
        await facade.park(VehicleType.MOTORCYCLE, "M1")
        clock.advance(hours=3)

        ticket, receipt = await facade.retrieve("M1")

        assert ticket.fee == 15.0
        assert "MOTORCYCLE - M1" in receipt
        assert "15.00" in receipt
        assert facade.log.records[-1].fee == 15.0

    @pytest.mark.asyncio
    async def test_retrieve_unknown(self):
        facade = make_facade()
        ticket, message = await facade.retrieve("NOPE")
        assert ticket is None
        assert message == "No parked vehicle with plate NOPE."
        assert facade.log.records[0].kind == TransactionKind.RETRIEVE_FAILED

    @pytest.mark.asyncio
    async def test_availability_report(self):
        facade = make_facade(slots=2)
        await facade.park(VehicleType.TRUCK, "T1")

        report = facade.availability_report()

        assert "Available slots: 1/2" in report
        assert "Slot 1: occupied by TRUCK - T1" in report
        assert "Slot 2: available" in report

    def test_empty_log_report(self):
        assert make_facade().log_report() == "No transactions yet."

    def test_record_formatting(self):
        record = TransactionRecord(
            kind=TransactionKind.RETRIEVED,
            plate_number="ABC123",
            timestamp=BASE_TIME,
            slot_number=2,
            fee=12.5,
        )
        assert str(record) == "[2026-03-02 09:00:00] RETRIEVED ABC123 slot 2 fee 12.50"


class TestMenu:
    def test_parse_vehicle_type(self):
        assert parse_vehicle_type("1") == VehicleType.CAR
        assert parse_vehicle_type(" Truck ") == VehicleType.TRUCK
        assert parse_vehicle_type("bus") is None

    @pytest.mark.asyncio
    async def test_full_session(self):
        facade = make_facade()
        output = []

        await run_menu(
            facade,
            input_func=scripted_input("1", "2", "M1", "2", "3", "M1", "4", "5"),
            output=output.append,
        )

        text = "\n".join(output)
        assert "MOTORCYCLE - M1 parked in slot 1" in text
        assert "Available slots: 1/2" in text
        assert "PARKING RECEIPT" in text
        assert "RETRIEVED M1" in text
        assert output[-1] == "Goodbye."
        assert facade.manager.available_slot_count() == 2

    @pytest.mark.asyncio
    async def test_invalid_input(self):
        facade = make_facade()
        output = []

        await run_menu(
            facade,
            input_func=scripted_input("9", "1", "bus", "1", "1", " ", "3", ""),
            output=output.append,
        )

        assert "Invalid option, choose 1-5." in output
        assert "Invalid vehicle type." in output
        assert output.count("Plate number must not be empty.") == 2
        assert facade.log.records == []

    @pytest.mark.asyncio
    async def test_stops_at_end_of_input(self):
        facade = make_facade()
        output = []
        await run_menu(facade, input_func=scripted_input(), output=output.append)
        assert len(output) == 1


class TestConsoleArgs:
    def test_overrides(self, tmp_path):
        args = parse_args(
            ["--config", str(tmp_path / "none.yaml"), "--slots", "3", "--whitelist", "A1", "--whitelist", "B2", "--delay", "0"]
        )

        cfg = build_config(args)

        assert cfg.lot.total_slots == 3
        assert cfg.lot.whitelist == ["A1", "B2"]
        assert cfg.lot.processing_delay_seconds == 0
        assert isinstance(cfg.lot, LotConfig)

    def test_invalid_override_rejected(self, tmp_path):
        args = parse_args(["--config", str(tmp_path / "none.yaml"), "--slots", "0"])
        with pytest.raises(ValueError):
            build_config(args)
