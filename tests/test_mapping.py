from datetime import date

import pytest

from app.domain.appointments.mapping import (
    map_create_payload,
    map_update_payload,
    validate_status,
)
from app.domain.appointments.schemas import AppointmentCreate, AppointmentUpdate
from app.errors import (
    InvalidEmailError,
    InvalidEnumValueError,
    InvalidStatusError,
    MissingFieldError,
)

STRUCTURED = {
    "psychiatrist_id": "P1",
    "patient_name": "Alice",
    "patient_email": "alice@example.com",
    "preferred_appointment_type": "virtual",
    "preferred_times": ["Weekday mornings"],
    "what_brings_you": "stress",
    "hoping_to_work_on": ["Not sure yet"],
    "spoken_before": "no",
}


def test_structured_payload_maps_to_pending_record():
    record = map_create_payload(AppointmentCreate(**STRUCTURED))

    assert record["status"] == "pending"
    assert record["psychiatrist_id"] == "P1"
    assert record["preferred_times"] == ["Weekday mornings"]
    assert record["hoping_to_work_on"] == ["Not sure yet"]
    assert record["preferred_date"] is None
    assert record["message"] is None


@pytest.mark.parametrize("status", ["approved", "declined", "completed", "archived"])
def test_client_supplied_status_is_ignored(status):
    record = map_create_payload(AppointmentCreate(**STRUCTURED, status=status))
    assert record["status"] == "pending"


@pytest.mark.parametrize(
    "absent, expected",
    [
        (("psychiatrist_id",), ["psychiatrist_id"]),
        (("patient_name",), ["patient_name"]),
        (("patient_email",), ["patient_email"]),
        (("psychiatrist_id", "patient_email"), ["psychiatrist_id", "patient_email"]),
    ],
)
def test_missing_required_fields_are_all_named(absent, expected):
    payload = {k: v for k, v in STRUCTURED.items() if k not in absent}
    with pytest.raises(MissingFieldError) as exc:
        map_create_payload(AppointmentCreate(**payload))
    assert exc.value.fields == expected


def test_blank_name_counts_as_missing():
    with pytest.raises(MissingFieldError):
        map_create_payload(AppointmentCreate(**{**STRUCTURED, "patient_name": "   "}))


@pytest.mark.parametrize(
    "email", ["not-an-email", "alice@example", "@example.com", "alice@@example.com", "a b@x.io"]
)
def test_malformed_emails_are_rejected(email):
    with pytest.raises(InvalidEmailError):
        map_create_payload(AppointmentCreate(**{**STRUCTURED, "patient_email": email}))


def test_email_check_is_case_insensitive_and_normalized():
    record = map_create_payload(
        AppointmentCreate(**{**STRUCTURED, "patient_email": " Alice@Example.COM "})
    )
    assert record["patient_email"] == "alice@example.com"


def test_legacy_payload_without_structured_fields():
    record = map_create_payload(
        AppointmentCreate(
            psychiatrist_id="P1",
            patient_name="Bob",
            patient_email="bob@example.com",
            preferred_date="2026-11-02",
            preferred_time="14:30",
            message="",
        )
    )
    assert record["preferred_date"] == date(2026, 11, 2)
    assert record["preferred_time"] == "14:30"
    assert record["message"] is None
    assert "preferred_appointment_type" not in record


def test_empty_legacy_date_is_stored_as_null():
    record = map_create_payload(
        AppointmentCreate(
            psychiatrist_id="P1",
            patient_name="Bob",
            patient_email="bob@example.com",
            preferred_date="",
        )
    )
    assert record["preferred_date"] is None


def test_structured_fields_become_required_once_any_is_used():
    with pytest.raises(MissingFieldError) as exc:
        map_create_payload(
            AppointmentCreate(
                psychiatrist_id="P1",
                patient_name="Bob",
                patient_email="bob@example.com",
                preferred_appointment_type="either",
            )
        )
    assert exc.value.fields == [
        "preferred_times",
        "what_brings_you",
        "hoping_to_work_on",
        "spoken_before",
    ]


def test_empty_time_window_list_is_missing():
    with pytest.raises(MissingFieldError) as exc:
        map_create_payload(AppointmentCreate(**{**STRUCTURED, "preferred_times": []}))
    assert exc.value.fields == ["preferred_times"]


@pytest.mark.parametrize(
    "field, value",
    [
        ("preferred_appointment_type", "telepathy"),
        ("preferred_times", ["Midnight"]),
        ("hoping_to_work_on", ["Astrology"]),
        ("spoken_before", "maybe"),
    ],
)
def test_unknown_enumerated_values_are_rejected(field, value):
    with pytest.raises(InvalidEnumValueError) as exc:
        map_create_payload(AppointmentCreate(**{**STRUCTURED, field: value}))
    assert exc.value.field == field


def test_other_goal_with_inline_text_is_accepted():
    record = map_create_payload(
        AppointmentCreate(**{**STRUCTURED, "hoping_to_work_on": ["Other: sleep", "Not sure yet"]})
    )
    assert record["hoping_to_work_on"] == ["Other: sleep", "Not sure yet"]


def test_bare_other_goal_needs_companion_text():
    with pytest.raises(MissingFieldError) as exc:
        map_create_payload(AppointmentCreate(**{**STRUCTURED, "hoping_to_work_on": ["Other:"]}))
    assert exc.value.fields == ["other_work_on"]

    record = map_create_payload(
        AppointmentCreate(
            **{**STRUCTURED, "hoping_to_work_on": ["Other"], "other_work_on": "grief"}
        )
    )
    assert record["other_work_on"] == "grief"


def test_duplicate_labels_are_collapsed():
    record = map_create_payload(
        AppointmentCreate(
            **{**STRUCTURED, "preferred_times": ["Weekends", "Weekends", "Weekday evenings"]}
        )
    )
    assert record["preferred_times"] == ["Weekends", "Weekday evenings"]


def test_update_only_returns_fields_present():
    updates = map_update_payload(AppointmentUpdate(patient_name="X"))
    assert updates == {"patient_name": "X"}


def test_update_writes_explicit_null_for_optional_fields():
    updates = map_update_payload(AppointmentUpdate(anything_else=None))
    assert updates == {"anything_else": None}


def test_update_cannot_clear_required_fields():
    with pytest.raises(MissingFieldError):
        map_update_payload(AppointmentUpdate(patient_email=None))
    with pytest.raises(MissingFieldError):
        map_update_payload(AppointmentUpdate(preferred_times=[]))


def test_update_ignores_status_and_psychiatrist():
    payload = AppointmentUpdate.model_validate({"status": "approved", "psychiatrist_id": "P2"})
    assert map_update_payload(payload) == {}


def test_update_bare_other_uses_existing_companion_text():
    updates = map_update_payload(
        AppointmentUpdate(hoping_to_work_on=["Other"]), existing_other_work_on="grief"
    )
    assert updates == {"hoping_to_work_on": ["Other"]}


def test_update_cannot_clear_text_that_a_stored_bare_other_needs():
    with pytest.raises(MissingFieldError) as exc:
        map_update_payload(
            AppointmentUpdate(other_work_on=""),
            existing_other_work_on="sleep",
            existing_goals=["Other"],
        )
    assert exc.value.fields == ["other_work_on"]


def test_update_clears_other_text_when_stored_goals_do_not_need_it():
    updates = map_update_payload(
        AppointmentUpdate(other_work_on=""),
        existing_other_work_on="sleep",
        existing_goals=["Other: sleep", "Not sure yet"],
    )
    assert updates == {"other_work_on": None}


@pytest.mark.parametrize("status", ["pending", "approved", "declined", "completed"])
def test_known_statuses_validate(status):
    assert validate_status(status) == status


@pytest.mark.parametrize("status", ["archived", "", None, "APPROVED"])
def test_unknown_statuses_are_rejected(status):
    with pytest.raises(InvalidStatusError):
        validate_status(status)
