"""
Servicio de gestión de procesos de medicación
"""
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core.exceptions import IllegalTransition, NoActiveBatch, ProcessConflict
from app.models.medication_process import MedicationProcess, MedicationProcessStep, ProcessStatus
from app.models.qr_scan_record import QRScanRecord
from app.schemas.medication_process import MedicationProcessCreate
from app.services.daily_process_service import DailyProcessService
from app.services.process_store import ProcessFilter, ProcessStore
from app.services.state_machine import ProcessAction
from app.services import state_machine
import logging

logger = logging.getLogger(__name__)


class MedicationProcessService:
    """Alta, consulta y acciones manuales sobre procesos de medicación"""

    def __init__(self, db: Session):
        self.db = db
        self.store = ProcessStore(db)
        self.batches = DailyProcessService(db)

    def get_processes(
            self,
            skip: int = 0,
            limit: int = 100,
            patient_id: Optional[int] = None,
            step: Optional[MedicationProcessStep] = None,
            status: Optional[ProcessStatus] = None,
            daily_process_id: Optional[int] = None
    ) -> List[MedicationProcess]:
        """Obtener procesos con filtros"""
        return self.store.find_many(ProcessFilter(
            daily_process_id=daily_process_id,
            step=step,
            statuses=[status] if status else None,
            patient_id=patient_id,
            skip=skip,
            limit=limit,
        ))

    def get_process_by_id(self, process_id: int) -> Optional[MedicationProcess]:
        return self.store.get(process_id)

    def find_open_process(
            self,
            patient_id: int,
            step: MedicationProcessStep,
            daily_process_id: int
    ) -> Optional[MedicationProcess]:
        """Proceso aún abierto (no COMPLETED) para el paciente y paso en el lote"""
        open_statuses = [s for s in ProcessStatus if s != ProcessStatus.COMPLETED]
        found = self.store.find_many(ProcessFilter(
            daily_process_id=daily_process_id,
            step=step,
            statuses=open_statuses,
            patient_id=patient_id,
            limit=1,
        ))
        return found[0] if found else None

    def create_process(self, data: MedicationProcessCreate, started_by_id: int) -> MedicationProcess:
        """
        Iniciar un proceso para (paciente, paso) en el lote indicado o en el de hoy.

        Un proceso en ERROR también bloquea la creación: debe reintentarse, no
        duplicarse.
        """
        if data.daily_process_id:
            batch = self.batches.get_by_id(data.daily_process_id)
        else:
            batch = self.batches.current_batch()
        if not batch:
            raise NoActiveBatch()

        existing = self.find_open_process(data.patient_id, data.step, batch.id)
        if existing:
            raise ProcessConflict(
                f"El paciente ya tiene un proceso de {data.step.value.lower()} "
                f"en estado {existing.status.value} (ID {existing.id})"
            )

        try:
            process = self.store.add_process(MedicationProcess(
                patient_id=data.patient_id,
                daily_process_id=batch.id,
                step=data.step,
                status=data.status,
                notes=data.notes,
                started_by_id=started_by_id,
            ))
        except IntegrityError:
            # Otro request creó el mismo proceso entre la verificación y el INSERT
            logger.warning(
                f"Proceso duplicado rechazado: paciente {data.patient_id}, "
                f"paso {data.step.value}, lote {batch.id}"
            )
            raise ProcessConflict(
                f"El paciente ya tiene un proceso de {data.step.value.lower()} "
                f"abierto en este proceso diario"
            )

        logger.info(
            f"Proceso {process.id} creado: paciente {process.patient_id}, "
            f"paso {process.step.value}, estado {process.status.value}"
        )
        return process

    def update_notes(self, process: MedicationProcess, notes: Optional[str]) -> MedicationProcess:
        process.notes = notes
        self.store.commit()
        return self.store.refresh(process)

    def apply_action(
            self,
            process: MedicationProcess,
            action: ProcessAction,
            notes: Optional[str] = None
    ) -> MedicationProcess:
        """Aplicar una acción manual vía la máquina de estados"""
        current = process.status
        target = state_machine.next_status(current, action)
        if target is None:
            raise IllegalTransition(
                f"No se puede aplicar {action.value} a un proceso en estado {current.value}"
            )

        if not self.store.compare_and_set_status(process.id, current, target, notes=notes):
            self.store.rollback()
            raise IllegalTransition(
                "El proceso fue modificado por otro usuario. Actualiza la vista e intenta de nuevo"
            )

        self.store.commit()
        logger.info(f"Proceso {process.id}: {current.value} -> {target.value} ({action.value})")
        return self.store.refresh(process)

    def get_scan_records(self, process_id: int) -> List[QRScanRecord]:
        return (
            self.db.query(QRScanRecord)
            .filter(QRScanRecord.medication_process_id == process_id)
            .order_by(QRScanRecord.scanned_at, QRScanRecord.id)
            .all()
        )
