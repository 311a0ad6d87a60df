# tests/test_medication_processes_api.py
from app.models.medication_process import ProcessStatus

from tests.factories import (
    make_daily_process,
    make_line_with_patients,
    make_process,
)

BASE_URL = "/api/medication-processes/"


def test_nurse_creates_process(client, db, nurse, nurse_headers):
    daily = make_daily_process(db)
    _, patients = make_line_with_patients(db, 1)

    response = client.post(
        BASE_URL,
        json={"patient_id": patients[0].id, "step": "DEVOLUCION"},
        headers=nurse_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "IN_PROGRESS"
    assert body["daily_process_id"] == daily.id
    assert body["started_by_id"] == nurse.id


def test_duplicate_process_is_conflict(client, db, nurse_headers):
    daily = make_daily_process(db)
    _, patients = make_line_with_patients(db, 1)
    make_process(db, patients[0], daily)

    response = client.post(
        BASE_URL,
        json={"patient_id": patients[0].id, "step": "DEVOLUCION"},
        headers=nurse_headers,
    )

    assert response.status_code == 409
    assert response.json()["kind"] == "ProcessConflict"


def test_pharmacy_cannot_create_process(client, db, pharmacy_headers):
    make_daily_process(db)
    _, patients = make_line_with_patients(db, 1)

    response = client.post(
        BASE_URL,
        json={"patient_id": patients[0].id, "step": "DEVOLUCION"},
        headers=pharmacy_headers,
    )

    assert response.status_code == 403


def test_cannot_create_with_terminal_status(client, db, nurse_headers):
    make_daily_process(db)
    _, patients = make_line_with_patients(db, 1)

    response = client.post(
        BASE_URL,
        json={"patient_id": patients[0].id, "step": "DEVOLUCION", "status": "COMPLETED"},
        headers=nurse_headers,
    )

    assert response.status_code == 422


def test_report_error_requires_notes(client, db, nurse_headers):
    daily = make_daily_process(db)
    _, patients = make_line_with_patients(db, 1)
    process = make_process(db, patients[0], daily)

    response = client.post(
        f"{BASE_URL}{process.id}/actions",
        json={"action": "REPORT_ERROR"},
        headers=nurse_headers,
    )

    assert response.status_code == 422


def test_report_error_and_retry(client, db, nurse_headers):
    daily = make_daily_process(db)
    _, patients = make_line_with_patients(db, 1)
    process_id = make_process(db, patients[0], daily).id

    response = client.post(
        f"{BASE_URL}{process_id}/actions",
        json={"action": "REPORT_ERROR", "notes": "Falta una ampolla"},
        headers=nurse_headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "ERROR"

    response = client.post(
        f"{BASE_URL}{process_id}/actions",
        json={"action": "RETRY"},
        headers=nurse_headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "IN_PROGRESS"


def test_illegal_action_is_conflict(client, db, nurse_headers):
    daily = make_daily_process(db)
    _, patients = make_line_with_patients(db, 1)
    process_id = make_process(db, patients[0], daily, status=ProcessStatus.IN_PROGRESS).id

    response = client.post(
        f"{BASE_URL}{process_id}/actions",
        json={"action": "START"},
        headers=nurse_headers,
    )

    assert response.status_code == 409
    assert response.json()["kind"] == "IllegalTransition"


def test_patch_updates_notes_only(client, db, nurse_headers):
    daily = make_daily_process(db)
    _, patients = make_line_with_patients(db, 1)
    process_id = make_process(db, patients[0], daily).id

    response = client.patch(
        f"{BASE_URL}{process_id}",
        json={"notes": "Paciente en ayuno", "status": "COMPLETED"},
        headers=nurse_headers,
    )

    assert response.status_code == 200
    assert response.json()["notes"] == "Paciente en ayuno"
    assert response.json()["status"] == "IN_PROGRESS"


def test_get_missing_process(client, db, nurse_headers):
    response = client.get(f"{BASE_URL}9999", headers=nurse_headers)
    assert response.status_code == 404


def test_list_requires_authentication(client, db):
    assert client.get(BASE_URL).status_code == 401
