"""
Máquina de estados de los procesos de medicación.

Las transiciones legales se declaran en una tabla explícita indexada por
(estado actual, disparador). Un disparador es un punto de control
(``QRCodeType``) o una acción manual de enfermería (``ProcessAction``).
Cualquier par que no esté en la tabla es ilegal.
"""
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple, Union
import enum

from app.models.medication_process import MedicationProcessStep, ProcessStatus
from app.models.qr_code import QRCodeType


class ProcessAction(str, enum.Enum):
    """Acciones manuales sobre un proceso"""
    START = "START"
    COMPLETE = "COMPLETE"
    REPORT_ERROR = "REPORT_ERROR"
    RETRY = "RETRY"


Trigger = Union[QRCodeType, ProcessAction]

TERMINAL_STATUSES = frozenset({ProcessStatus.COMPLETED, ProcessStatus.ERROR})

NON_TERMINAL_STATUSES = frozenset(
    status for status in ProcessStatus if status not in TERMINAL_STATUSES
)

TRANSITIONS: Dict[Tuple[ProcessStatus, Trigger], ProcessStatus] = {
    # Escaneos en puntos de control
    (ProcessStatus.IN_PROGRESS, QRCodeType.PHARMACY_DISPATCH): ProcessStatus.DISPATCHED_FROM_PHARMACY,
    (ProcessStatus.IN_PROGRESS, QRCodeType.PHARMACY_DISPATCH_DEVOLUTION): ProcessStatus.DISPATCHED_FROM_PHARMACY,
    (ProcessStatus.DISPATCHED_FROM_PHARMACY, QRCodeType.SERVICE_ARRIVAL): ProcessStatus.DELIVERED,
    (ProcessStatus.DISPATCHED_FROM_PHARMACY, QRCodeType.PHARMACY_DELIVERIES): ProcessStatus.COMPLETED,
    (ProcessStatus.DELIVERED, QRCodeType.DELIVERY_CONFIRMATION): ProcessStatus.COMPLETED,
    (ProcessStatus.ERROR, QRCodeType.PROCESS_RETRY): ProcessStatus.IN_PROGRESS,

    # Acciones manuales
    (ProcessStatus.PENDING, ProcessAction.START): ProcessStatus.IN_PROGRESS,
    (ProcessStatus.IN_PROGRESS, ProcessAction.COMPLETE): ProcessStatus.COMPLETED,
    (ProcessStatus.DELIVERED, ProcessAction.COMPLETE): ProcessStatus.COMPLETED,
    (ProcessStatus.ERROR, ProcessAction.RETRY): ProcessStatus.IN_PROGRESS,
}

# ERROR es alcanzable desde cualquier estado no terminal
TRANSITIONS.update({
    (status, ProcessAction.REPORT_ERROR): ProcessStatus.ERROR
    for status in NON_TERMINAL_STATUSES
})


@dataclass(frozen=True)
class Checkpoint:
    """Reglas de un punto de control físico"""
    qr_type: QRCodeType
    steps: Tuple[MedicationProcessStep, ...]
    label: str
    next_step_hint: str

    @property
    def default_step(self) -> MedicationProcessStep:
        return self.steps[0]

    def serves(self, step: MedicationProcessStep) -> bool:
        return step in self.steps


CHECKPOINTS: Dict[QRCodeType, Checkpoint] = {
    QRCodeType.PHARMACY_DISPATCH: Checkpoint(
        qr_type=QRCodeType.PHARMACY_DISPATCH,
        steps=(MedicationProcessStep.DISPENSACION,),
        label="Salida de farmacia",
        next_step_hint="Escanear QR de Llegada a Servicio al recibir la medicación",
    ),
    QRCodeType.PHARMACY_DISPATCH_DEVOLUTION: Checkpoint(
        qr_type=QRCodeType.PHARMACY_DISPATCH_DEVOLUTION,
        steps=(MedicationProcessStep.DEVOLUCION,),
        label="Salida de farmacia (devolución)",
        next_step_hint="Escanear QR de Salida de Farmacia (Entregas) para completar el proceso de devolución",
    ),
    QRCodeType.SERVICE_ARRIVAL: Checkpoint(
        qr_type=QRCodeType.SERVICE_ARRIVAL,
        steps=(MedicationProcessStep.DISPENSACION, MedicationProcessStep.ENTREGA),
        label="Llegada a servicio",
        next_step_hint="Confirmar la entrega escaneando el QR de Confirmación de Entrega",
    ),
    QRCodeType.PHARMACY_DELIVERIES: Checkpoint(
        qr_type=QRCodeType.PHARMACY_DELIVERIES,
        steps=(MedicationProcessStep.DEVOLUCION,),
        label="Salida de farmacia (entregas)",
        next_step_hint="Proceso de devolución completado",
    ),
    QRCodeType.DELIVERY_CONFIRMATION: Checkpoint(
        qr_type=QRCodeType.DELIVERY_CONFIRMATION,
        steps=(MedicationProcessStep.DISPENSACION, MedicationProcessStep.ENTREGA),
        label="Confirmación de entrega",
        next_step_hint="Proceso de entrega completado",
    ),
    QRCodeType.PROCESS_RETRY: Checkpoint(
        qr_type=QRCodeType.PROCESS_RETRY,
        steps=tuple(MedicationProcessStep),
        label="Reintento de proceso",
        next_step_hint="Reiniciar el flujo desde el paso en curso",
    ),
}


def next_status(current: ProcessStatus, trigger: Trigger) -> Optional[ProcessStatus]:
    """Estado siguiente para (estado, disparador), None si la transición es ilegal"""
    return TRANSITIONS.get((current, trigger))


def is_legal(current: ProcessStatus, trigger: Trigger) -> bool:
    return (current, trigger) in TRANSITIONS


def expected_prior_statuses(trigger: Trigger) -> FrozenSet[ProcessStatus]:
    """Estados desde los que el disparador tiene una transición"""
    return frozenset(
        status for (status, candidate) in TRANSITIONS if candidate == trigger
    )


def get_checkpoint(qr_type: QRCodeType) -> Checkpoint:
    return CHECKPOINTS[qr_type]
