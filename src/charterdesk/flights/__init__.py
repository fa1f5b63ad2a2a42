"""
Flight records and round-trip projection.
"""

from .models import (
    Flight,
    FlightStatus,
    UnresolvedReference,
    ResolvedReference,
    ReturnReference,
    build_return_leg,
    parse_flight,
    parse_flights,
    parse_reference,
    reference_id,
)
from .formatting import format_date, format_schedule, format_status
from .projector import (
    ProjectionWarning,
    RoundTripProjection,
    RoundTripSummary,
    WarningKind,
    find_return_leg_ids,
    find_symmetric_pairs,
    group_by_date,
    project_flight,
    project_round_trips,
)

__all__ = [
    "Flight",
    "FlightStatus",
    "UnresolvedReference",
    "ResolvedReference",
    "ReturnReference",
    "build_return_leg",
    "parse_flight",
    "parse_flights",
    "parse_reference",
    "reference_id",
    "format_date",
    "format_schedule",
    "format_status",
    "ProjectionWarning",
    "RoundTripProjection",
    "RoundTripSummary",
    "WarningKind",
    "find_return_leg_ids",
    "find_symmetric_pairs",
    "group_by_date",
    "project_flight",
    "project_round_trips",
]
