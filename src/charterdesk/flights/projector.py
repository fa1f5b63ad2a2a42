"""
Round-trip projection of a flight list.

Splits a flat flight list into outbound flights (listed) and return legs
(hidden, shown under their outbound flight), and builds the display
fields of each listed row. Only one reference hop is followed: a flight is
a return leg when some other flight references it, whatever it references
itself. Anomalies are reported as warnings and never raise.
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from loguru import logger

from .formatting import format_date, format_schedule
from .models import Flight, ResolvedReference, reference_id


class WarningKind(str, Enum):
    SELF_REFERENCE = "self_reference"           # Flight names itself as return leg
    CHAINED_REFERENCE = "chained_reference"     # Return leg references another flight
    SHARED_RETURN_LEG = "shared_return_leg"     # Several flights claim one return leg
    MISSING_RETURN_LEG = "missing_return_leg"   # Referenced flight not in the list
    SYMMETRIC_PAIR = "symmetric_pair"           # Two flights reference each other


@dataclass(frozen=True)
class ProjectionWarning:
    """
    Data anomaly found during projection.

    Attributes:
        kind: Anomaly type
        flight_id: Flight the anomaly was found on
        detail: Human-readable description
    """
    kind: WarningKind
    flight_id: str
    detail: str


@dataclass(frozen=True)
class RoundTripProjection:
    """
    Display row for one outbound flight.

    Attributes:
        outbound: The listed flight
        return_leg: Populated return flight, if available
        display_route: Route text ("MXP-DXB-MXP" or "MXP → DXB")
        is_round_trip: Whether the flight has a return leg
        dangling_reference: The reference points at itself or at a flight
            missing from the list
    """
    outbound: Flight
    return_leg: Optional[Flight]
    display_route: str
    is_round_trip: bool
    dangling_reference: bool = False

    @property
    def flight_numbers(self) -> str:
        if self.return_leg is None:
            return self.outbound.flight_no
        return f"{self.outbound.flight_no} / {self.return_leg.flight_no}"

    @property
    def status_label(self) -> str:
        if self.return_leg is None:
            return self.outbound.status
        return f"{self.outbound.status} / {self.return_leg.status} (Return)"

    @property
    def schedule_label(self) -> str:
        schedule = format_schedule(self.outbound.date, self.outbound.time)
        if self.return_leg is None:
            return schedule
        return_schedule = format_schedule(self.return_leg.date, self.return_leg.time)
        return f"{schedule} | Return: {return_schedule}"


@dataclass(frozen=True)
class RoundTripSummary:
    """
    Result of one projection pass.

    Counts are derived from the projections on access.
    """
    projections: Tuple[RoundTripProjection, ...]
    return_leg_ids: FrozenSet[str]
    warnings: Tuple[ProjectionWarning, ...] = ()

    @property
    def outbound(self) -> List[Flight]:
        return [p.outbound for p in self.projections]

    @property
    def round_trip_count(self) -> int:
        return sum(1 for p in self.projections if p.is_round_trip)

    @property
    def single_sector_count(self) -> int:
        return len(self.projections) - self.round_trip_count


def outbound_route(flight: Flight) -> str:
    return f"{flight.origin} → {flight.destination}"


def round_trip_route(outbound: Flight, return_leg: Flight) -> str:
    return f"{outbound.origin}-{outbound.destination}-{return_leg.destination}"


def project_flight(flight: Flight, known_ids: FrozenSet[str] = frozenset()) -> RoundTripProjection:
    """
    Build the display row for a flight already known to be outbound.

    Args:
        flight: Outbound flight
        known_ids: Identifiers of every flight in the list

    Returns:
        RoundTripProjection
    """
    ref_id = reference_id(flight.return_flight)

    if ref_id is None:
        return RoundTripProjection(flight, None, outbound_route(flight), is_round_trip=False)

    if ref_id == flight.id:
        return RoundTripProjection(
            flight, None, outbound_route(flight),
            is_round_trip=False,
            dangling_reference=True,
        )

    reference = flight.return_flight
    if isinstance(reference, ResolvedReference) and reference.flight.id == ref_id:
        return_leg = reference.flight
        return RoundTripProjection(
            flight, return_leg, round_trip_route(flight, return_leg),
            is_round_trip=True,
        )

    # Bare identifier: no lookup, outbound route only
    return RoundTripProjection(
        flight, None, outbound_route(flight),
        is_round_trip=True,
        dangling_reference=ref_id not in known_ids,
    )


def find_symmetric_pairs(flights: Iterable[Flight]) -> Dict[str, str]:
    """
    Flights that reference each other as return legs (A -> B and B -> A).

    Args:
        flights: Flight list

    Returns:
        Mapping of the first-seen flight of each pair to the other one
    """
    refs: Dict[str, Optional[str]] = {}
    for flight in flights:
        refs.setdefault(flight.id, reference_id(flight.return_flight))

    pairs: Dict[str, str] = {}
    seen = set()
    for flight_id, ref_id in refs.items():
        if ref_id is None or ref_id == flight_id or flight_id in seen:
            continue
        if refs.get(ref_id) == flight_id:
            pairs[flight_id] = ref_id
            seen.update((flight_id, ref_id))
    return pairs


def find_return_leg_ids(flights: Iterable[Flight]) -> FrozenSet[str]:
    """
    Identifiers referenced as a return leg by some other flight.

    A flight referencing itself is never a return leg, even when other
    flights reference it too. Of two flights referencing each other, the
    first seen stays outbound.

    Args:
        flights: Flight list

    Returns:
        Set of return leg identifiers
    """
    flights = list(flights)
    ids = set()
    self_referencing = set()
    for flight in flights:
        ref_id = reference_id(flight.return_flight)
        if ref_id is None:
            continue
        if ref_id == flight.id:
            self_referencing.add(ref_id)
        else:
            ids.add(ref_id)
    return frozenset(ids - self_referencing - set(find_symmetric_pairs(flights)))


def _collect_warnings(
    flights: List[Flight],
    return_leg_ids: FrozenSet[str],
    known_ids: FrozenSet[str],
) -> List[ProjectionWarning]:
    warnings = []
    claims = Counter()
    pairs = find_symmetric_pairs(flights)
    paired_ids = set(pairs) | set(pairs.values())

    for first_id, second_id in pairs.items():
        warnings.append(ProjectionWarning(
            WarningKind.SYMMETRIC_PAIR, first_id,
            f"Flights {first_id} and {second_id} reference each other as return legs",
        ))

    for flight in flights:
        ref_id = reference_id(flight.return_flight)
        if ref_id is None:
            continue

        if ref_id == flight.id:
            warnings.append(ProjectionWarning(
                WarningKind.SELF_REFERENCE, flight.id,
                f"Flight {flight.flight_no or flight.id} references itself as return leg",
            ))
            continue

        claims[ref_id] += 1

        if flight.id in return_leg_ids and flight.id not in paired_ids:
            warnings.append(ProjectionWarning(
                WarningKind.CHAINED_REFERENCE, flight.id,
                f"Return leg {flight.flight_no or flight.id} references flight {ref_id}",
            ))

        if ref_id not in known_ids and not isinstance(flight.return_flight, ResolvedReference):
            warnings.append(ProjectionWarning(
                WarningKind.MISSING_RETURN_LEG, flight.id,
                f"Return leg {ref_id} of flight {flight.flight_no or flight.id} is not in the list",
            ))

    for ref_id, count in claims.items():
        if count > 1:
            warnings.append(ProjectionWarning(
                WarningKind.SHARED_RETURN_LEG, ref_id,
                f"Flight {ref_id} is the return leg of {count} flights",
            ))

    return warnings


def project_round_trips(flights: Iterable[Flight]) -> RoundTripSummary:
    """
    Project a flight list into listed rows and hidden return legs.

    Args:
        flights: Flight list, as fetched

    Returns:
        RoundTripSummary with one projection per outbound flight, in input
        order
    """
    flights = list(flights)
    known_ids = frozenset(f.id for f in flights)
    return_leg_ids = find_return_leg_ids(flights)

    projections = tuple(
        project_flight(flight, known_ids)
        for flight in flights
        if flight.id not in return_leg_ids
    )

    warnings = _collect_warnings(flights, return_leg_ids, known_ids)
    for warning in warnings:
        logger.warning(f"Flight data: {warning.detail}")

    logger.debug(
        f"Projected {len(flights)} flights: {len(projections)} listed, "
        f"{len(return_leg_ids & known_ids)} return legs hidden"
    )
    return RoundTripSummary(projections, return_leg_ids, tuple(warnings))


def group_by_date(flights: Iterable[Flight]) -> Dict[str, List[Flight]]:
    """
    Group flights by formatted departure date for the timeline view.

    Args:
        flights: Flight list

    Returns:
        Mapping of date to flights, in first-seen order
    """
    groups: Dict[str, List[Flight]] = {}
    for flight in flights:
        groups.setdefault(format_date(flight.date), []).append(flight)
    return groups
