"""
Despacho de escaneos QR sobre los procesos de medicación.

Un escaneo en un punto de control avanza en bloque todos los procesos
elegibles de una línea. Cada proceso se actualiza en su propia transacción
(cambio de estado + comprobante de escaneo); el lote completo admite éxito
parcial: un proceso que otro request movió antes se omite sin afectar al resto,
y lo ya confirmado nunca se revierte.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    InvalidToken,
    NoActiveBatch,
    NoEligibleProcesses,
    StoreUnavailable,
    Unauthorized,
    UnknownLine,
)
from app.models.medication_process import MedicationProcessStep
from app.models.qr_code import QRCodeType
from app.models.user import User
from app.services.daily_process_service import DailyProcessService
from app.services.line_service import LineService
from app.services.process_store import ProcessFilter, ProcessStore
from app.services.qr_registry import QRRegistry
from app.services import state_machine
import logging

logger = logging.getLogger(__name__)


@dataclass
class DispatchContext:
    """Contexto del escaneo"""
    caller: Optional[User]
    destination_line_id: int
    transaction_type: str
    temperature: float
    step_filter: Optional[MedicationProcessStep] = None
    # Tipo de QR al que está atado el endpoint, None acepta cualquier punto de control
    expected_type: Optional[QRCodeType] = None


@dataclass
class DispatchResult:
    success: bool
    transitioned_count: int
    line_name: str
    next_step_hint: str
    message: str
    step: MedicationProcessStep
    transitioned_process_ids: List[int] = field(default_factory=list)
    skipped_process_ids: List[int] = field(default_factory=list)


def _patients_label(count: int) -> str:
    return f"{count} paciente{'s' if count != 1 else ''}"


class ScanDispatcher:
    """Aplica un escaneo QR a los procesos elegibles de una línea"""

    def __init__(
            self,
            db: Session,
            store: Optional[ProcessStore] = None,
            registry: Optional[QRRegistry] = None,
            batches: Optional[DailyProcessService] = None,
            lines: Optional[LineService] = None
    ):
        self.db = db
        self.store = store or ProcessStore(db)
        self.registry = registry or QRRegistry(db)
        self.batches = batches or DailyProcessService(db)
        self.lines = lines or LineService(db)

    def dispatch(
            self,
            scan_token: str,
            context: DispatchContext,
            now: Optional[datetime] = None
    ) -> DispatchResult:
        caller = context.caller
        if caller is None or not caller.is_active:
            raise Unauthorized()

        try:
            qr_code = self.registry.resolve(scan_token)
            if not qr_code or not qr_code.is_active:
                raise InvalidToken()
            if context.expected_type and qr_code.type != context.expected_type:
                raise InvalidToken("El código QR no corresponde a este punto de control")

            checkpoint = state_machine.get_checkpoint(qr_code.type)
            step = context.step_filter or checkpoint.default_step
            if not checkpoint.serves(step):
                raise InvalidToken(
                    f"El QR de {checkpoint.label} no aplica al paso {step.value}"
                )

            # El lote se resuelve una sola vez por escaneo
            batch = self.batches.current_batch(now)
            if not batch:
                raise NoActiveBatch()

            line = self.lines.find_line(context.destination_line_id)
            if not line:
                raise UnknownLine()
        except SQLAlchemyError as e:
            logger.error(f"Error resolviendo contexto del escaneo: {e}")
            raise StoreUnavailable() from e

        eligible = self.store.find_many(ProcessFilter(
            daily_process_id=batch.id,
            step=step,
            statuses=state_machine.expected_prior_statuses(qr_code.type),
            line_id=line.id,
        ))

        if not eligible:
            logger.warning(
                f"Escaneo {qr_code.type.value} sin procesos elegibles "
                f"(línea {line.name}, paso {step.value}, lote {batch.id})"
            )
            raise NoEligibleProcesses(
                f"No hay pacientes con proceso de {step.value.lower()} pendiente "
                f"para {checkpoint.label.lower()} en la línea {line.display_name}"
            )

        # Valores planos: el commit por registro expira las instancias
        candidates = [(p.id, p.patient_id, p.status) for p in eligible]
        qr_code_id = qr_code.id
        qr_type = qr_code.type
        line_id = line.id
        line_name = line.display_name
        batch_id = batch.id
        caller_id = caller.id

        transitioned: List[int] = []
        skipped: List[int] = []

        for process_id, patient_id, current_status in candidates:
            target = state_machine.next_status(current_status, qr_type)
            if target is None:
                skipped.append(process_id)
                continue

            if not self.store.compare_and_set_status(process_id, current_status, target):
                self.store.rollback()
                skipped.append(process_id)
                logger.info(f"Proceso {process_id} cambió de estado durante el escaneo; se omite")
                continue

            self.store.create_scan_record(
                patient_id=patient_id,
                medication_process_id=process_id,
                qr_code_id=qr_code_id,
                scanned_by_id=caller_id,
                daily_process_id=batch_id,
                temperature=context.temperature,
                destination_line_id=line_id,
                transaction_type=context.transaction_type,
            )
            self.store.commit()
            transitioned.append(process_id)

        if not transitioned:
            # Todos los elegibles los tomó otro escaneo
            raise NoEligibleProcesses(
                f"Los procesos de la línea {line_name} ya fueron registrados por otro escaneo"
            )

        logger.info(
            f"Escaneo {qr_type.value} por usuario {caller_id}: "
            f"{len(transitioned)} procesos avanzados, {len(skipped)} omitidos (línea {line_name})"
        )

        return DispatchResult(
            success=True,
            transitioned_count=len(transitioned),
            line_name=line_name,
            next_step_hint=checkpoint.next_step_hint,
            message=(
                f"Escaneo de {checkpoint.label.lower()} registrado para {_patients_label(len(transitioned))} "
                f"de la línea {line_name}"
            ),
            step=step,
            transitioned_process_ids=transitioned,
            skipped_process_ids=skipped,
        )
