# tests/test_state_machine.py
import pytest

from app.models.medication_process import MedicationProcessStep, ProcessStatus
from app.models.qr_code import QRCodeType
from app.services import state_machine
from app.services.state_machine import ProcessAction


def test_dispatch_checkpoints_move_in_progress_to_dispatched():
    for qr_type in (QRCodeType.PHARMACY_DISPATCH, QRCodeType.PHARMACY_DISPATCH_DEVOLUTION):
        assert state_machine.next_status(ProcessStatus.IN_PROGRESS, qr_type) == ProcessStatus.DISPATCHED_FROM_PHARMACY


def test_forward_chain_reaches_completed():
    status = ProcessStatus.PENDING
    for trigger in (
        ProcessAction.START,
        QRCodeType.PHARMACY_DISPATCH,
        QRCodeType.SERVICE_ARRIVAL,
        QRCodeType.DELIVERY_CONFIRMATION,
    ):
        status = state_machine.next_status(status, trigger)
    assert status == ProcessStatus.COMPLETED


def test_unlisted_pair_is_illegal():
    assert state_machine.next_status(ProcessStatus.PENDING, QRCodeType.PHARMACY_DISPATCH) is None
    assert state_machine.next_status(ProcessStatus.COMPLETED, QRCodeType.PROCESS_RETRY) is None
    assert not state_machine.is_legal(ProcessStatus.DELIVERED, QRCodeType.PHARMACY_DISPATCH_DEVOLUTION)


@pytest.mark.parametrize("status", sorted(state_machine.NON_TERMINAL_STATUSES))
def test_error_reachable_from_every_non_terminal_status(status):
    assert state_machine.next_status(status, ProcessAction.REPORT_ERROR) == ProcessStatus.ERROR


def test_completed_has_no_outgoing_edges():
    assert not [key for key in state_machine.TRANSITIONS if key[0] == ProcessStatus.COMPLETED]


def test_error_only_goes_back_to_in_progress():
    targets = {
        target for (status, _), target in state_machine.TRANSITIONS.items()
        if status == ProcessStatus.ERROR
    }
    assert targets == {ProcessStatus.IN_PROGRESS}


def test_only_retry_checkpoint_is_licensed_to_retry():
    licensed = [
        qr_type for qr_type in QRCodeType
        if ProcessStatus.ERROR in state_machine.expected_prior_statuses(qr_type)
    ]
    assert licensed == [QRCodeType.PROCESS_RETRY]


def test_expected_prior_statuses_per_checkpoint():
    assert state_machine.expected_prior_statuses(QRCodeType.PHARMACY_DISPATCH_DEVOLUTION) == {ProcessStatus.IN_PROGRESS}
    assert state_machine.expected_prior_statuses(QRCodeType.SERVICE_ARRIVAL) == {ProcessStatus.DISPATCHED_FROM_PHARMACY}


def test_every_checkpoint_type_has_rules():
    for qr_type in QRCodeType:
        checkpoint = state_machine.get_checkpoint(qr_type)
        assert checkpoint.steps
        assert checkpoint.next_step_hint
        assert state_machine.expected_prior_statuses(qr_type)


def test_devolution_checkpoint_serves_only_devolution():
    checkpoint = state_machine.get_checkpoint(QRCodeType.PHARMACY_DISPATCH_DEVOLUTION)
    assert checkpoint.default_step == MedicationProcessStep.DEVOLUCION
    assert not checkpoint.serves(MedicationProcessStep.DISPENSACION)
