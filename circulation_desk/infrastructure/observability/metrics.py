"""Prometheus metrics for loan volume, refusals and advisory fines"""

from decimal import Decimal
from typing import Mapping
from prometheus_client import Counter, Gauge

# Circulation metrics
circulation_counter = Counter(
    "library_circulation_total",
    "Borrow and return attempts",
    ["action", "outcome"],  # action: borrow | return
)

active_loans_gauge = Gauge(
    "library_active_loans",
    "Items currently on loan",
)

# Fine metrics
fines_assessed_counter = Counter(
    "library_fines_assessed",
    "Advisory fines owed on late returns (currency units)",
)

late_returns_counter = Counter(
    "library_late_returns_total",
    "Returns made after the due date",
)

# Catalog
catalog_size_gauge = Gauge(
    "library_catalog_size",
    "Registered catalog items",
    ["kind"],  # book | magazine
)

members_gauge = Gauge(
    "library_members",
    "Registered members",
)


def record_circulation(action: str, outcome: str) -> None:
    """Record a borrow/return attempt and its outcome"""
    circulation_counter.labels(action=action, outcome=outcome).inc()


def record_late_return(fine: Decimal) -> None:
    """Record fine owed on a late return; nothing is collected"""
    late_returns_counter.inc()
    if fine > 0:
        fines_assessed_counter.inc(float(fine))


def record_library_state(items_by_kind: Mapping[str, int], member_count: int, active_loan_count: int) -> None:
    """Snapshot one library's sizes into the gauges"""
    for kind, count in items_by_kind.items():
        catalog_size_gauge.labels(kind=kind).set(count)
    members_gauge.set(member_count)
    active_loans_gauge.set(active_loan_count)
