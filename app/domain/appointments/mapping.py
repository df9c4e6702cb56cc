"""
Validation and mapping of appointment payloads onto stored rows.

Pure functions: nothing here touches the database, so every validation error
is raised before any write happens.
"""

from typing import Any, Iterable, Optional

from ...errors import (
    InvalidEmailError,
    InvalidEnumValueError,
    InvalidStatusError,
    MissingFieldError,
)
from ...models import APPOINTMENT_STATUSES
from ...shared.validators import blank_to_none, is_blank, validate_email
from .schemas import (
    APPOINTMENT_TYPES,
    CURRENT_FIELDS,
    CURRENT_REQUIRED_FIELDS,
    OTHER_GOAL_PREFIX,
    SPOKEN_BEFORE_OPTIONS,
    TIME_WINDOWS,
    WORK_ON_GOALS,
    AppointmentCreate,
    AppointmentUpdate,
    CurrentIntake,
    LegacyIntake,
)

REQUIRED_FIELDS = ("psychiatrist_id", "patient_name", "patient_email")


def normalize_email(email: str) -> str:
    try:
        return validate_email(email)
    except ValueError as e:
        raise InvalidEmailError() from e


def validate_status(status: Any) -> str:
    if status not in APPOINTMENT_STATUSES:
        raise InvalidStatusError(APPOINTMENT_STATUSES)
    return status


def _check_choice(field: str, value: Any, allowed: Iterable[str]) -> str:
    if value not in allowed:
        raise InvalidEnumValueError(field, value, allowed)
    return value


def _dedupe(values: list[str]) -> list[str]:
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def is_other_goal(goal: str) -> bool:
    return goal == OTHER_GOAL_PREFIX or goal.startswith(f"{OTHER_GOAL_PREFIX}:")


def other_goal_needs_detail(goal: str) -> bool:
    """A bare "Other" / "Other:" carries no text of its own"""
    return is_other_goal(goal) and not goal[len(OTHER_GOAL_PREFIX):].lstrip(":").strip()


def check_time_windows(times: Optional[list[str]]) -> list[str]:
    if not times:
        raise MissingFieldError(["preferred_times"])
    for label in times:
        _check_choice("preferred_times", label, TIME_WINDOWS)
    return _dedupe(times)


def check_goals(goals: Optional[list[str]], other_work_on: Optional[str]) -> list[str]:
    if not goals:
        raise MissingFieldError(["hoping_to_work_on"])
    for goal in goals:
        if is_other_goal(goal):
            if other_goal_needs_detail(goal) and is_blank(other_work_on):
                raise MissingFieldError(["other_work_on"])
            continue
        _check_choice("hoping_to_work_on", goal, WORK_ON_GOALS + (f"{OTHER_GOAL_PREFIX}: ...",))
    return _dedupe(goals)


def build_current_intake(values: dict[str, Any]) -> CurrentIntake:
    """Validate the structured questionnaire; all of its required fields must be present"""
    missing = [
        name
        for name in CURRENT_REQUIRED_FIELDS
        if is_blank(values.get(name)) or values.get(name) == []
    ]
    if missing:
        raise MissingFieldError(missing)

    other_work_on = blank_to_none(values.get("other_work_on"))
    return CurrentIntake(
        preferred_appointment_type=_check_choice(
            "preferred_appointment_type", values["preferred_appointment_type"], APPOINTMENT_TYPES
        ),
        preferred_times=check_time_windows(values["preferred_times"]),
        what_brings_you=values["what_brings_you"].strip(),
        hoping_to_work_on=check_goals(values["hoping_to_work_on"], other_work_on),
        other_work_on=other_work_on,
        spoken_before=_check_choice(
            "spoken_before", values["spoken_before"], SPOKEN_BEFORE_OPTIONS
        ),
        anything_else=blank_to_none(values.get("anything_else")),
    )


def map_create_payload(payload: AppointmentCreate) -> dict[str, Any]:
    """
    Validate an inbound request and return the column values for a new row.

    Raises MissingFieldError, InvalidEmailError or InvalidEnumValueError.
    Any status supplied by the caller is dropped; new requests are pending.
    """
    missing = [name for name in REQUIRED_FIELDS if is_blank(getattr(payload, name))]
    if missing:
        raise MissingFieldError(missing)

    record: dict[str, Any] = {
        "psychiatrist_id": payload.psychiatrist_id.strip(),
        "patient_name": payload.patient_name.strip(),
        "patient_email": normalize_email(payload.patient_email),
        "status": "pending",
    }

    legacy = LegacyIntake(
        preferred_date=payload.preferred_date,
        preferred_time=payload.preferred_time,
        message=payload.message,
    )
    record.update(legacy.model_dump())

    if payload.uses_current_fields():
        current = build_current_intake({name: getattr(payload, name) for name in CURRENT_FIELDS})
        record.update(current.model_dump())

    return record


def map_update_payload(
    payload: AppointmentUpdate,
    existing_other_work_on: Optional[str] = None,
    existing_goals: Optional[list[str]] = None,
) -> dict[str, Any]:
    """
    Return only the columns explicitly present in the payload, validated.

    Fields left out of the payload are left out of the result. Fields that
    are required at intake cannot be cleared. Goals and their "Other" text
    are checked together, falling back to the stored value of whichever
    one the payload leaves out.
    """
    changes = payload.model_dump(exclude_unset=True)
    updates: dict[str, Any] = {}

    cleared = [
        name
        for name in ("patient_name", "patient_email") + CURRENT_REQUIRED_FIELDS
        if name in changes and (is_blank(changes[name]) or changes[name] == [])
    ]
    if cleared:
        raise MissingFieldError(cleared)

    if "patient_name" in changes:
        updates["patient_name"] = changes["patient_name"].strip()
    if "patient_email" in changes:
        updates["patient_email"] = normalize_email(changes["patient_email"])
    if "preferred_appointment_type" in changes:
        updates["preferred_appointment_type"] = _check_choice(
            "preferred_appointment_type", changes["preferred_appointment_type"], APPOINTMENT_TYPES
        )
    if "preferred_times" in changes:
        updates["preferred_times"] = check_time_windows(changes["preferred_times"])
    if "what_brings_you" in changes:
        updates["what_brings_you"] = changes["what_brings_you"].strip()
    if "other_work_on" in changes:
        updates["other_work_on"] = blank_to_none(changes["other_work_on"])
    if "hoping_to_work_on" in changes:
        other_work_on = updates.get("other_work_on", existing_other_work_on)
        updates["hoping_to_work_on"] = check_goals(changes["hoping_to_work_on"], other_work_on)
    elif "other_work_on" in changes and existing_goals:
        check_goals(existing_goals, updates["other_work_on"])
    if "spoken_before" in changes:
        updates["spoken_before"] = _check_choice(
            "spoken_before", changes["spoken_before"], SPOKEN_BEFORE_OPTIONS
        )
    if "anything_else" in changes:
        updates["anything_else"] = blank_to_none(changes["anything_else"])

    return updates
