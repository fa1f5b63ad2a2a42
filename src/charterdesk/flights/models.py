"""
Flight data models and the hydration boundary for raw API records.

The flights API returns ``returnFlightId`` either as a bare identifier or
as the populated return flight, depending on the query. Records are
converted here into a Flight whose return reference is tagged as either
UnresolvedReference or ResolvedReference, so nothing downstream has to
inspect shapes.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from loguru import logger
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

# Keys the API may use for a flight's identifier
ID_KEYS = ("_id", "id")

# Keys the API may use for the return flight reference
RETURN_KEYS = ("returnFlightId", "return_flight_id", "return_flight")


class FlightStatus(str, Enum):
    SCHEDULED = "scheduled"
    DELAYED = "delayed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    IN_PROGRESS = "in-progress"


STATUS_LABELS: Dict[FlightStatus, str] = {
    FlightStatus.SCHEDULED: "Scheduled",
    FlightStatus.DELAYED: "Delayed",
    FlightStatus.CANCELLED: "Cancelled",
    FlightStatus.COMPLETED: "Completed",
    FlightStatus.IN_PROGRESS: "In Progress",
}


def _coerce_identifier(value: Any) -> Optional[str]:
    # bool is an int subclass but never an identifier
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, (str, int)):
        ident = str(value).strip()
        return ident or None
    return None


class UnresolvedReference(BaseModel):
    """Return flight known only by identifier."""
    model_config = ConfigDict(frozen=True)

    flight_id: str


class Flight(BaseModel):
    """
    A scheduled flight.

    Attributes:
        id: Flight identifier
        flight_no: Flight number
        origin: Origin airport code
        destination: Destination airport code
        date: Departure date as sent by the API
        time: Departure time (HH:mm)
        aircraft: Aircraft registration or type
        status: Flight status (see FlightStatus)
        return_flight: Reference to the return leg, if any
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    flight_no: str = Field(default="", validation_alias=AliasChoices("flightNo", "flight_no"))
    origin: str = ""
    destination: str = ""
    date: Optional[str] = None
    time: Optional[str] = None
    aircraft: Optional[str] = None
    status: str = FlightStatus.SCHEDULED.value
    return_flight: Optional[Union[UnresolvedReference, "ResolvedReference"]] = None

    @field_validator("id", mode="before")
    @classmethod
    def _check_id(cls, value: Any) -> str:
        ident = _coerce_identifier(value)
        if ident is None:
            raise ValueError("flight id must be a non-empty string or whole number")
        return ident

    @field_validator("flight_no", "origin", "destination", mode="before")
    @classmethod
    def _blank_if_missing(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        return FlightStatus.SCHEDULED.value if value in (None, "") else value

    @field_validator("date", "time", "aircraft", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class ResolvedReference(BaseModel):
    """Return flight populated inline by the API."""
    model_config = ConfigDict(frozen=True)

    flight: Flight

    @property
    def flight_id(self) -> str:
        return self.flight.id


ReturnReference = Union[UnresolvedReference, ResolvedReference]

Flight.model_rebuild()
ResolvedReference.model_rebuild()


def reference_id(reference: Any) -> Optional[str]:
    """
    Canonical identifier of a return reference.

    Args:
        reference: UnresolvedReference, ResolvedReference or None

    Returns:
        The referenced flight id, or None for no (or an unrecognized) reference
    """
    if isinstance(reference, UnresolvedReference):
        return reference.flight_id or None
    if isinstance(reference, ResolvedReference):
        return reference.flight.id
    return None


def parse_reference(value: Any, embedded: bool = False) -> Optional[ReturnReference]:
    """
    Convert a raw ``returnFlightId`` value into a tagged reference.

    Args:
        value: Identifier, populated flight object, existing reference or None
        embedded: True when the value belongs to an already embedded flight;
            such references are kept as identifiers only

    Returns:
        ReturnReference, or None when the value carries no usable identifier
    """
    if value is None:
        return None

    if isinstance(value, (UnresolvedReference, ResolvedReference)):
        return value

    if isinstance(value, Flight):
        return ResolvedReference(flight=value)

    ident = _coerce_identifier(value)
    if ident is not None:
        return UnresolvedReference(flight_id=ident)

    if isinstance(value, Mapping):
        ident = next(
            (i for i in (_coerce_identifier(value.get(k)) for k in ID_KEYS) if i is not None),
            None,
        )
        if ident is None:
            logger.debug("Return flight object has no identifier, ignoring")
            return None

        # An object carrying nothing but its id is not populated
        if embedded or set(value) <= set(ID_KEYS):
            return UnresolvedReference(flight_id=ident)

        flight = _parse_record(value, embedded=True)
        if flight is None:
            return UnresolvedReference(flight_id=ident)
        return ResolvedReference(flight=flight)

    logger.debug(f"Unrecognized return flight reference of type {type(value).__name__}")
    return None


def _parse_record(record: Mapping[str, Any], embedded: bool) -> Optional[Flight]:
    data = dict(record)
    raw_reference = None
    for key in RETURN_KEYS:
        if key in data:
            raw_reference = data.pop(key)

    try:
        flight = Flight.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Skipping malformed flight record {record.get('_id', record.get('id'))!r}: {e.error_count()} error(s)")
        return None

    reference = parse_reference(raw_reference, embedded=embedded)
    if reference is None:
        return flight
    return flight.model_copy(update={"return_flight": reference})


def parse_flight(record: Mapping[str, Any]) -> Optional[Flight]:
    """
    Convert one raw API flight record.

    Args:
        record: Flight JSON object

    Returns:
        Flight, or None if the record has no usable identifier or fields
    """
    if not isinstance(record, Mapping):
        logger.warning(f"Skipping flight record of type {type(record).__name__}")
        return None
    return _parse_record(record, embedded=False)


def parse_flights(records: Iterable[Mapping[str, Any]]) -> List[Flight]:
    """
    Convert a raw API flight list, dropping unusable records.

    Args:
        records: Flight JSON objects

    Returns:
        List of Flight, in input order
    """
    flights = []
    for record in records:
        flight = parse_flight(record)
        if flight is not None:
            flights.append(flight)
    return flights


def build_return_leg(
    outbound: Flight,
    flight_no: Optional[str] = None,
    date: Optional[str] = None,
    time: Optional[str] = None,
    status: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Derive the create payload for an outbound flight's return leg.

    The route is reversed and the aircraft kept. Blank overrides fall back
    to the outbound values, and the flight number to the outbound number
    with an "R" suffix.

    Args:
        outbound: Outbound flight
        flight_no: Return flight number
        date: Return departure date
        time: Return departure time
        status: Return flight status

    Returns:
        Flight JSON for the create endpoint; the API assigns the id
    """
    return {
        "flightNo": flight_no or f"{outbound.flight_no}R",
        "origin": outbound.destination,
        "destination": outbound.origin,
        "date": date or outbound.date,
        "time": time or outbound.time,
        "aircraft": outbound.aircraft,
        "status": status or outbound.status,
        "isRoundTrip": True,
    }
