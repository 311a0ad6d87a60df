# tests/test_medication_process_service.py
import pytest

from app.core.database import SessionLocal
from app.core.exceptions import IllegalTransition, NoActiveBatch, ProcessConflict
from app.models.medication_process import MedicationProcessStep, ProcessStatus
from app.schemas.medication_process import MedicationProcessCreate
from app.services.medication_process_service import MedicationProcessService
from app.services.state_machine import ProcessAction

from tests.factories import (
    make_daily_process,
    make_line_with_patients,
    make_process,
    make_user,
)


@pytest.fixture
def setup(db):
    nurse = make_user(db)
    daily = make_daily_process(db)
    _, patients = make_line_with_patients(db, 2)
    return nurse, daily, patients


def test_create_defaults_to_today_and_in_progress(db, setup):
    nurse, daily, patients = setup
    service = MedicationProcessService(db)

    process = service.create_process(
        MedicationProcessCreate(patient_id=patients[0].id, step=MedicationProcessStep.DEVOLUCION),
        started_by_id=nurse.id,
    )

    assert process.daily_process_id == daily.id
    assert process.status == ProcessStatus.IN_PROGRESS
    assert process.started_by_id == nurse.id


def test_duplicate_open_process_is_rejected(db, setup):
    nurse, daily, patients = setup
    make_process(db, patients[0], daily, status=ProcessStatus.DISPATCHED_FROM_PHARMACY)

    with pytest.raises(ProcessConflict):
        MedicationProcessService(db).create_process(
            MedicationProcessCreate(patient_id=patients[0].id, step=MedicationProcessStep.DEVOLUCION),
            started_by_id=nurse.id,
        )


def test_error_process_blocks_duplicate(db, setup):
    nurse, daily, patients = setup
    make_process(db, patients[0], daily, status=ProcessStatus.ERROR)

    with pytest.raises(ProcessConflict):
        MedicationProcessService(db).create_process(
            MedicationProcessCreate(patient_id=patients[0].id, step=MedicationProcessStep.DEVOLUCION),
            started_by_id=nurse.id,
        )


def test_completed_process_allows_a_new_one(db, setup):
    nurse, daily, patients = setup
    make_process(db, patients[0], daily, status=ProcessStatus.COMPLETED)

    process = MedicationProcessService(db).create_process(
        MedicationProcessCreate(patient_id=patients[0].id, step=MedicationProcessStep.DEVOLUCION),
        started_by_id=nurse.id,
    )
    assert process.status == ProcessStatus.IN_PROGRESS


def test_same_patient_different_step_is_allowed(db, setup):
    nurse, daily, patients = setup
    make_process(db, patients[0], daily)

    process = MedicationProcessService(db).create_process(
        MedicationProcessCreate(patient_id=patients[0].id, step=MedicationProcessStep.DISPENSACION),
        started_by_id=nurse.id,
    )
    assert process.step == MedicationProcessStep.DISPENSACION


def test_create_without_batch_fails(db):
    nurse = make_user(db)
    _, patients = make_line_with_patients(db, 1)

    with pytest.raises(NoActiveBatch):
        MedicationProcessService(db).create_process(
            MedicationProcessCreate(patient_id=patients[0].id, step=MedicationProcessStep.DEVOLUCION),
            started_by_id=nurse.id,
        )


def test_report_error_then_retry(db, setup):
    _, daily, patients = setup
    process = make_process(db, patients[0], daily)
    service = MedicationProcessService(db)

    process = service.apply_action(process, ProcessAction.REPORT_ERROR, notes="Medicamento equivocado")
    assert process.status == ProcessStatus.ERROR
    assert process.notes == "Medicamento equivocado"

    process = service.apply_action(process, ProcessAction.RETRY)
    assert process.status == ProcessStatus.IN_PROGRESS


def test_start_pending_process(db, setup):
    _, daily, patients = setup
    process = make_process(db, patients[0], daily, status=ProcessStatus.PENDING)

    process = MedicationProcessService(db).apply_action(process, ProcessAction.START)
    assert process.status == ProcessStatus.IN_PROGRESS


def test_illegal_action_is_rejected(db, setup):
    _, daily, patients = setup
    process = make_process(db, patients[0], daily, status=ProcessStatus.COMPLETED)

    with pytest.raises(IllegalTransition):
        MedicationProcessService(db).apply_action(process, ProcessAction.REPORT_ERROR, notes="tarde")


def test_filters(db, setup):
    _, daily, patients = setup
    make_process(db, patients[0], daily)
    make_process(db, patients[1], daily, step=MedicationProcessStep.DISPENSACION, status=ProcessStatus.DELIVERED)
    service = MedicationProcessService(db)

    assert len(service.get_processes(daily_process_id=daily.id)) == 2
    assert len(service.get_processes(patient_id=patients[1].id)) == 1
    assert len(service.get_processes(status=ProcessStatus.DELIVERED)) == 1
    assert service.get_processes(step=MedicationProcessStep.VALIDACION) == []


def test_concurrent_create_keeps_a_single_open_process(db, setup):
    nurse, daily, patients = setup
    nurse_id = nurse.id
    data = MedicationProcessCreate(patient_id=patients[0].id, step=MedicationProcessStep.DEVOLUCION)

    class RacingService(MedicationProcessService):
        """Otra enfermera crea el mismo proceso entre la verificación y el INSERT"""

        def find_open_process(self, *args):
            found = super().find_open_process(*args)
            with SessionLocal() as other:
                MedicationProcessService(other).create_process(data, started_by_id=nurse_id)
            return found

    with pytest.raises(ProcessConflict):
        RacingService(db).create_process(data, started_by_id=nurse_id)

    processes = MedicationProcessService(db).get_processes(
        patient_id=patients[0].id, step=MedicationProcessStep.DEVOLUCION, daily_process_id=daily.id
    )
    assert len(processes) == 1
    assert processes[0].status == ProcessStatus.IN_PROGRESS


def test_completing_a_process_frees_the_slot(db, setup):
    nurse, daily, patients = setup
    process = make_process(db, patients[0], daily, status=ProcessStatus.DELIVERED)
    service = MedicationProcessService(db)

    service.apply_action(process, ProcessAction.COMPLETE)

    process = service.create_process(
        MedicationProcessCreate(patient_id=patients[0].id, step=MedicationProcessStep.DEVOLUCION),
        started_by_id=nurse.id,
    )
    assert process.status == ProcessStatus.IN_PROGRESS
