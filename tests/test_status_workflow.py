import pytest

from app.models import AppointmentRequest


@pytest.fixture
def pending_request(db_session, make_psychiatrist):
    doctor = make_psychiatrist()
    request = AppointmentRequest(
        psychiatrist_id=doctor.id,
        patient_name="Alice",
        patient_email="alice@example.com",
        status="pending",
    )
    db_session.add(request)
    db_session.commit()
    db_session.refresh(request)
    return doctor, request


def test_owner_approves_request(client, pending_request, psychiatrist_headers):
    doctor, request = pending_request

    response = client.put(
        "/appointments/update",
        json={"id": request.id, "status": "approved"},
        headers=psychiatrist_headers(doctor),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["error"] is None
    assert body["data"]["status"] == "approved"
    assert body["data"]["id"] == request.id


@pytest.mark.parametrize(
    "path", [["approved", "pending"], ["declined", "approved"], ["completed", "pending", "declined"]]
)
def test_any_status_can_move_to_any_other(client, pending_request, psychiatrist_headers, path):
    doctor, request = pending_request

    for status in path:
        response = client.put(
            "/appointments/update",
            json={"id": request.id, "status": status},
            headers=psychiatrist_headers(doctor),
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == status


def test_setting_same_status_twice_is_idempotent(
    client, db_session, pending_request, psychiatrist_headers
):
    doctor, request = pending_request

    for _ in range(2):
        response = client.put(
            "/appointments/update",
            json={"id": request.id, "status": "approved"},
            headers=psychiatrist_headers(doctor),
        )
        assert response.status_code == 200

    db_session.refresh(request)
    assert request.status == "approved"


def test_unknown_status_is_rejected_and_record_unchanged(
    client, db_session, pending_request, psychiatrist_headers
):
    doctor, request = pending_request

    response = client.put(
        "/appointments/update",
        json={"id": request.id, "status": "archived"},
        headers=psychiatrist_headers(doctor),
    )

    assert response.status_code == 400
    assert response.json() == {
        "error": "Invalid status. Must be one of: pending, approved, declined, completed"
    }
    db_session.refresh(request)
    assert request.status == "pending"


@pytest.mark.parametrize("body", [{"status": "approved"}, {"id": "abc"}, {}])
def test_missing_id_or_status(client, admin_headers, body):
    response = client.put("/appointments/update", json=body, headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields: id, status"}


def test_unknown_request_id(client, admin_headers):
    response = client.put(
        "/appointments/update", json={"id": "missing", "status": "approved"}, headers=admin_headers
    )

    assert response.status_code == 404


def test_other_psychiatrist_cannot_triage(
    client, db_session, pending_request, make_psychiatrist, psychiatrist_headers
):
    _, request = pending_request
    other = make_psychiatrist()

    response = client.put(
        "/appointments/update",
        json={"id": request.id, "status": "declined"},
        headers=psychiatrist_headers(other),
    )

    assert response.status_code == 403
    db_session.refresh(request)
    assert request.status == "pending"


def test_patient_cannot_triage_own_request(client, pending_request, patient_headers):
    _, request = pending_request

    response = client.put(
        "/appointments/update",
        json={"id": request.id, "status": "approved"},
        headers=patient_headers("alice@example.com"),
    )

    assert response.status_code == 403


def test_admin_can_triage_any_request(client, pending_request, admin_headers):
    _, request = pending_request

    response = client.put(
        "/appointments/update",
        json={"id": request.id, "status": "completed"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "completed"


def test_open_mode_skips_ownership_checks(client, pending_request, monkeypatch):
    _, request = pending_request
    monkeypatch.setattr("app.config.AUTH_REQUIRED", False)

    response = client.put(
        "/appointments/update", json={"id": request.id, "status": "declined"}
    )

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "declined"


def test_tampered_token_is_rejected(client, pending_request):
    _, request = pending_request

    response = client.put(
        "/appointments/update",
        json={"id": request.id, "status": "approved"},
        headers={"Authorization": "Bearer not.a.token"},
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired session token"}
