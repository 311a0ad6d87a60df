# tests/test_qr_scan_api.py
from sqlalchemy.exc import OperationalError

from app.core.exceptions import StoreUnavailable
from app.models.medication_process import MedicationProcessStep, ProcessStatus
from app.models.qr_code import QRCodeType
from app.services.qr_registry import QRRegistry

from tests.factories import (
    make_daily_process,
    make_line_with_patients,
    make_process,
    make_qr,
)

DEVOLUTION_URL = "/api/qr-scan/pharmacy-dispatch-devolution"
DISPATCH_URL = "/api/qr-scan/dispatch"


def _payload(qr_code, line, **overrides):
    payload = {
        "qr_id": qr_code.qr_id,
        "temperature": 4.0,
        "destination_line_id": line.id,
        "transaction_type": "SALIDA",
    }
    payload.update(overrides)
    return payload


def test_devolution_dispatch_end_to_end(client, db, pharmacy_headers):
    daily = make_daily_process(db)
    line, patients = make_line_with_patients(db, 3)
    for patient in patients:
        make_process(db, patient, daily)
    qr_code = make_qr(db)

    response = client.post(DEVOLUTION_URL, json=_payload(qr_code, line), headers=pharmacy_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["transitioned_count"] == 3
    assert body["line_name"] == line.display_name
    assert body["step"] == "DEVOLUCION"
    assert body["next_step_hint"]

    listed = client.get(
        "/api/medication-processes/",
        params={"status": ProcessStatus.DISPATCHED_FROM_PHARMACY.value},
        headers=pharmacy_headers,
    )
    assert len(listed.json()) == 3


def test_repeat_scan_returns_no_eligible(client, db, pharmacy_headers):
    daily = make_daily_process(db)
    line, patients = make_line_with_patients(db, 1)
    make_process(db, patients[0], daily)
    qr_code = make_qr(db)

    assert client.post(DEVOLUTION_URL, json=_payload(qr_code, line), headers=pharmacy_headers).status_code == 200
    response = client.post(DEVOLUTION_URL, json=_payload(qr_code, line), headers=pharmacy_headers)

    assert response.status_code == 400
    assert response.json()["kind"] == "NoEligibleProcesses"
    assert response.json()["success"] is False


def test_scan_without_session_is_unauthorized(client, db):
    make_daily_process(db)
    line, _ = make_line_with_patients(db, 1)
    qr_code = make_qr(db)

    response = client.post(DEVOLUTION_URL, json=_payload(qr_code, line))

    assert response.status_code == 401
    assert response.json()["kind"] == "Unauthorized"


def test_bound_endpoint_rejects_other_checkpoint(client, db, pharmacy_headers):
    make_daily_process(db)
    line, _ = make_line_with_patients(db, 1)
    arrival_qr = make_qr(db, QRCodeType.SERVICE_ARRIVAL)

    response = client.post(DEVOLUTION_URL, json=_payload(arrival_qr, line), headers=pharmacy_headers)

    assert response.status_code == 400
    assert response.json()["kind"] == "InvalidToken"


def test_unknown_line(client, db, pharmacy_headers):
    make_daily_process(db)
    qr_code = make_qr(db)
    line, _ = make_line_with_patients(db, 1)

    response = client.post(
        DEVOLUTION_URL,
        json=_payload(qr_code, line, destination_line_id=424242),
        headers=pharmacy_headers,
    )

    assert response.status_code == 400
    assert response.json()["kind"] == "UnknownLine"


def test_no_active_batch(client, db, pharmacy_headers):
    line, _ = make_line_with_patients(db, 1)
    qr_code = make_qr(db)

    response = client.post(DEVOLUTION_URL, json=_payload(qr_code, line), headers=pharmacy_headers)

    assert response.status_code == 400
    assert response.json()["kind"] == "NoActiveBatch"


def test_missing_temperature_is_rejected(client, db, pharmacy_headers):
    line, _ = make_line_with_patients(db, 1)
    qr_code = make_qr(db)
    payload = _payload(qr_code, line)
    del payload["temperature"]

    response = client.post(DEVOLUTION_URL, json=payload, headers=pharmacy_headers)

    assert response.status_code == 422


def test_non_numeric_temperature_is_rejected(client, db, pharmacy_headers):
    line, _ = make_line_with_patients(db, 1)
    qr_code = make_qr(db)

    response = client.post(
        DEVOLUTION_URL,
        json=_payload(qr_code, line, temperature="frío"),
        headers=pharmacy_headers,
    )

    assert response.status_code == 422


def test_generic_dispatch_uses_token_type(client, db, pharmacy_headers):
    daily = make_daily_process(db)
    line, patients = make_line_with_patients(db, 2)
    delivered = make_process(db, patients[0], daily, step=MedicationProcessStep.ENTREGA,
                             status=ProcessStatus.DISPATCHED_FROM_PHARMACY)
    qr_code = make_qr(db, QRCodeType.SERVICE_ARRIVAL)

    response = client.post(
        DISPATCH_URL,
        json=_payload(qr_code, line, step="ENTREGA"),
        headers=pharmacy_headers,
    )

    assert response.status_code == 200
    assert response.json()["transitioned_process_ids"] == [delivered.id]

    scans = client.get(f"/api/medication-processes/{delivered.id}/scans", headers=pharmacy_headers)
    assert scans.status_code == 200
    assert len(scans.json()) == 1
    assert scans.json()[0]["destination_line_id"] == line.id


def test_store_outage_returns_503_without_details(client, db, pharmacy_headers, monkeypatch):
    make_daily_process(db)
    line, _ = make_line_with_patients(db, 1)
    qr_code = make_qr(db)

    def broken_resolve(self, token):
        raise OperationalError("SELECT qr_codes", {}, Exception("connection refused"))

    monkeypatch.setattr(QRRegistry, "resolve", broken_resolve)

    response = client.post(DISPATCH_URL, json=_payload(qr_code, line), headers=pharmacy_headers)

    assert response.status_code == 503
    assert response.json() == {
        "success": False,
        "kind": "StoreUnavailable",
        "error": StoreUnavailable.default_message,
    }
