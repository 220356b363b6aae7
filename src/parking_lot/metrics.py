"""Prometheus metrics for the parking lot."""

from prometheus_client import Counter, Gauge, Histogram, CollectorRegistry, generate_latest

# Create a custom registry to avoid conflicts with default metrics
REGISTRY = CollectorRegistry()

# Parking fees histogram (currency units)
PARKING_FEES = Histogram(
    "parking_fee",
    "Fee charged per completed ticket",
    ["vehicle_type"],
    buckets=(5.0, 10.0, 15.0, 20.0, 30.0, 45.0, 60.0, 90.0, 120.0, 240.0),
    registry=REGISTRY,
)

# Parking duration histogram (in hours)
PARKING_DURATION = Histogram(
    "parking_duration_hours",
    "Length of completed parking sessions",
    ["vehicle_type"],
    buckets=(0.25, 0.5, 1.0, 2.0, 3.0, 4.0, 8.0, 12.0, 24.0),
    registry=REGISTRY,
)

# Successful operations
VEHICLES_PARKED = Counter(
    "parking_vehicles_parked_total",
    "Total number of vehicles parked",
    ["vehicle_type"],
    registry=REGISTRY,
)

VEHICLES_RETRIEVED = Counter(
    "parking_vehicles_retrieved_total",
    "Total number of vehicles retrieved",
    ["vehicle_type"],
    registry=REGISTRY,
)

# Rejected operations by reason
REJECTIONS = Counter(
    "parking_rejections_total",
    "Total number of rejected park or retrieve requests",
    ["operation", "reason"],
    registry=REGISTRY,
)

# Slot gauges
TOTAL_SLOTS = Gauge(
    "parking_slots_total",
    "Total number of parking slots",
    registry=REGISTRY,
)

AVAILABLE_SLOTS = Gauge(
    "parking_slots_available",
    "Number of available parking slots",
    registry=REGISTRY,
)

OCCUPIED_SLOTS = Gauge(
    "parking_slots_occupied",
    "Number of occupied parking slots",
    registry=REGISTRY,
)


def record_park(vehicle_type: str) -> None:
    """Record a successful park."""
    VEHICLES_PARKED.labels(vehicle_type=vehicle_type).inc()


def record_retrieval(vehicle_type: str, fee: float, duration_hours: float) -> None:
    """Record a successful retrieval with its fee and duration."""
    VEHICLES_RETRIEVED.labels(vehicle_type=vehicle_type).inc()
    PARKING_FEES.labels(vehicle_type=vehicle_type).observe(fee)
    PARKING_DURATION.labels(vehicle_type=vehicle_type).observe(duration_hours)


def record_rejection(operation: str, reason: str) -> None:
    """Record a rejected request."""
    REJECTIONS.labels(operation=operation, reason=reason).inc()


def update_slot_counts(total: int, available: int, occupied: int) -> None:
    """Update overall slot count gauges."""
    TOTAL_SLOTS.set(total)
    AVAILABLE_SLOTS.set(available)
    OCCUPIED_SLOTS.set(occupied)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest(REGISTRY)
