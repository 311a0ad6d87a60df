"""
Acceso transaccional a los procesos de medicación
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional

from sqlalchemy import update, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import StoreUnavailable
from app.models.line import HospitalService
from app.models.medication_process import MedicationProcess, MedicationProcessStep, ProcessStatus
from app.models.patient import Patient
from app.models.qr_scan_record import QRScanRecord
import logging

logger = logging.getLogger(__name__)


@dataclass
class ProcessFilter:
    """Filtro de búsqueda de procesos; los campos en None no filtran"""
    daily_process_id: Optional[int] = None
    step: Optional[MedicationProcessStep] = None
    statuses: Optional[Iterable[ProcessStatus]] = None
    line_id: Optional[int] = None
    patient_id: Optional[int] = None
    skip: int = 0
    limit: Optional[int] = None


class ProcessStore:
    """
    Almacén de procesos de medicación.

    ``compare_and_set_status`` es el único camino que modifica el estado de un
    proceso existente: el UPDATE solo aplica si el estado en base de datos sigue
    siendo el esperado, así que de dos escaneos concurrentes solo uno gana.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_many(self, process_filter: ProcessFilter) -> List[MedicationProcess]:
        """Buscar procesos que cumplan el filtro"""
        query = self.db.query(MedicationProcess).options(
            joinedload(MedicationProcess.patient).joinedload(Patient.service)
        )

        if process_filter.daily_process_id is not None:
            query = query.filter(MedicationProcess.daily_process_id == process_filter.daily_process_id)

        if process_filter.step is not None:
            query = query.filter(MedicationProcess.step == process_filter.step)

        if process_filter.statuses is not None:
            query = query.filter(MedicationProcess.status.in_(list(process_filter.statuses)))

        if process_filter.patient_id is not None:
            query = query.filter(MedicationProcess.patient_id == process_filter.patient_id)

        if process_filter.line_id is not None:
            line_patients = (
                self.db.query(Patient.id)
                .join(HospitalService, Patient.service_id == HospitalService.id)
                .filter(HospitalService.line_id == process_filter.line_id)
            )
            query = query.filter(MedicationProcess.patient_id.in_(line_patients))

        query = query.order_by(MedicationProcess.id).offset(process_filter.skip)
        if process_filter.limit is not None:
            query = query.limit(process_filter.limit)

        try:
            return query.all()
        except SQLAlchemyError as e:
            logger.error(f"Error consultando procesos de medicación: {e}")
            raise StoreUnavailable() from e

    def get(self, process_id: int) -> Optional[MedicationProcess]:
        try:
            return self.db.query(MedicationProcess).filter(MedicationProcess.id == process_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Error obteniendo proceso {process_id}: {e}")
            raise StoreUnavailable() from e

    def compare_and_set_status(
            self,
            process_id: int,
            expected_status: ProcessStatus,
            new_status: ProcessStatus,
            notes: Optional[str] = None
    ) -> bool:
        """
        Cambiar el estado solo si sigue siendo ``expected_status``.

        Retorna True si la fila se actualizó y False en caso de conflicto (otro
        request ya la movió). No hace commit: la transacción la cierra el llamador.
        """
        values = {
            "status": new_status,
            "open_slot": MedicationProcess.open_slot_for(new_status),
            "updated_at": func.now(),
        }
        if notes is not None:
            values["notes"] = notes

        stmt = (
            update(MedicationProcess)
            .where(
                MedicationProcess.id == process_id,
                MedicationProcess.status == expected_status
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )

        try:
            result = self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Error actualizando estado del proceso {process_id}: {e}")
            self.rollback()
            raise StoreUnavailable() from e

        return result.rowcount == 1

    def create_scan_record(self, **fields) -> QRScanRecord:
        """Agregar un comprobante de escaneo a la transacción actual"""
        record = QRScanRecord(**fields)
        try:
            self.db.add(record)
            self.db.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error registrando escaneo: {e}")
            self.rollback()
            raise StoreUnavailable() from e
        return record

    def add_process(self, process: MedicationProcess) -> MedicationProcess:
        """
        Persistir un proceso nuevo (el estado inicial se fija al crearlo).

        Un IntegrityError se propaga tras el rollback: otro proceso abierto ocupa
        el mismo paciente, paso y día.
        """
        try:
            self.db.add(process)
            self.db.commit()
            self.db.refresh(process)
        except IntegrityError:
            self.rollback()
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error creando proceso de medicación: {e}")
            self.rollback()
            raise StoreUnavailable() from e
        return process

    def commit(self):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error confirmando transacción: {e}")
            self.rollback()
            raise StoreUnavailable() from e

    def rollback(self):
        self.db.rollback()

    def refresh(self, process: MedicationProcess) -> MedicationProcess:
        self.db.refresh(process)
        return process
