"""
Domain validators.

Pure functions: each takes plain values or row dicts, returns nothing on
success and raises a domain error describing the first rule that failed.
"""

import re
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from app.core.errors import ConflictError, DomainValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_TEXT_LENGTH = 3
MIN_PASSWORD_LENGTH = 3


def has_min_length(value: Optional[str], minimum: int = MIN_TEXT_LENGTH) -> bool:
    return value is not None and len(value.strip()) >= minimum


def is_valid_email(value: Optional[str]) -> bool:
    return bool(value) and EMAIL_PATTERN.match(value) is not None


# -------- Users --------

def validate_registration(
    first_name: Optional[str],
    last_name: Optional[str],
    username: Optional[str],
    password: Optional[str],
) -> None:
    if not has_min_length(first_name) or not has_min_length(last_name):
        raise DomainValidationError(
            "first_name and last_name are required and must have at least three (3) letters."
        )
    if not is_valid_email(username):
        raise DomainValidationError("The username must be a valid email address.")
    if not has_min_length(password, MIN_PASSWORD_LENGTH):
        raise DomainValidationError("The password must have at least three (3) characters.")


# -------- Events --------

def validate_event_fields(
    name: Optional[str],
    description: Optional[str],
    price: Optional[float],
    duration_in_minutes: Optional[int],
    max_assistance: Optional[int],
) -> None:
    if not has_min_length(name) or not has_min_length(description):
        raise DomainValidationError(
            "name and description are required and must have at least three (3) letters."
        )
    if (price is not None and price < 0) or (duration_in_minutes is not None and duration_in_minutes < 0):
        raise DomainValidationError("price and duration_in_minutes cannot be lower than zero.")
    if max_assistance is None or max_assistance < 1:
        raise DomainValidationError("max_assistance must be greater than zero.")


def validate_assistance_within_capacity(max_assistance: int, event_location: Dict[str, Any]) -> None:
    """Event.max_assistance must fit in the venue"""
    if max_assistance > event_location["max_capacity"]:
        raise DomainValidationError(
            "max_assistance is greater than the max_capacity of the event location."
        )


def validate_tags_exist(requested: Iterable[int], known: Iterable[int]) -> None:
    missing = sorted(set(requested) - set(known))
    if missing:
        raise DomainValidationError(
            f"Unknown tag id(s): {', '.join(str(m) for m in missing)}.",
            details={"missing_tags": missing},
        )


def ensure_event_deletable(enrollment_count: int) -> None:
    if enrollment_count > 0:
        raise ConflictError("At least one user is enrolled in the event.")


# -------- Enrollments --------

def validate_enrollment(
    event: Dict[str, Any],
    enrolled_count: int,
    already_enrolled: bool,
    now: Optional[datetime] = None,
) -> None:
    """Checks run in order: duplicate, capacity, date, enrollment switch"""
    now = now or datetime.utcnow()
    if already_enrolled:
        raise ConflictError("The user is already enrolled in the event.")
    if enrolled_count >= event["max_assistance"]:
        raise ConflictError("The event has reached its maximum number of attendees (max_assistance).")
    if event["start_date"] <= now:
        raise ConflictError("Cannot enroll in an event that already started or takes place today (start_date).")
    if not event["enabled_for_enrollment"]:
        raise ConflictError("The event is not enabled for enrollment (enabled_for_enrollment).")


def validate_unenrollment(
    event: Dict[str, Any],
    is_enrolled: bool,
    now: Optional[datetime] = None,
) -> None:
    now = now or datetime.utcnow()
    if event["start_date"] <= now:
        raise ConflictError("Cannot leave an event that already started or takes place today (start_date).")
    if not is_enrolled:
        raise ConflictError("The user is not enrolled in the event.")


# -------- Event locations --------

def validate_event_location_fields(
    id_location: Optional[int],
    name: Optional[str],
    full_address: Optional[str],
    max_capacity: Optional[int],
) -> None:
    if not id_location or not name or not full_address or max_capacity is None:
        raise DomainValidationError("id_location, name, full_address and max_capacity are required.")
    if not has_min_length(name):
        raise DomainValidationError("name must have at least three (3) letters.")
    if max_capacity < 1:
        raise DomainValidationError("max_capacity must be greater than zero.")


def validate_capacity_covers_events(max_capacity: int, largest_assistance: int) -> None:
    """A venue cannot shrink below an event already scheduled there"""
    if max_capacity < largest_assistance:
        raise ConflictError(
            f"max_capacity cannot be lower than the max_assistance ({largest_assistance}) "
            "of an event held at this location."
        )


def ensure_event_location_deletable(event_count: int) -> None:
    if event_count > 0:
        raise ConflictError("Cannot delete: there are events associated with this location.")
