"""
Servicio de gestión de pacientes
"""
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional

from app.models.line import HospitalService
from app.models.patient import Patient
from app.schemas.patient import PatientCreate
import logging

logger = logging.getLogger(__name__)


class PatientService:
    """Servicio para gestión de pacientes hospitalizados"""

    def __init__(self, db: Session):
        self.db = db

    def get_patients(
            self,
            skip: int = 0,
            limit: int = 100,
            line_id: Optional[int] = None,
            service_id: Optional[int] = None,
            active_only: bool = True
    ) -> List[Patient]:
        """Obtener pacientes con filtros"""
        query = self.db.query(Patient).options(joinedload(Patient.service))

        if service_id:
            query = query.filter(Patient.service_id == service_id)

        if line_id:
            query = query.join(HospitalService).filter(HospitalService.line_id == line_id)

        if active_only:
            query = query.filter(Patient.is_active.is_(True))

        return query.order_by(Patient.name).offset(skip).limit(limit).all()

    def get_patient_by_id(self, patient_id: int) -> Optional[Patient]:
        return self.db.query(Patient).filter(Patient.id == patient_id).first()

    def get_patient_by_document(self, document_number: str) -> Optional[Patient]:
        return self.db.query(Patient).filter(Patient.document_number == document_number).first()

    def create_patient(self, patient_data: PatientCreate) -> Patient:
        """Crear nuevo paciente"""
        try:
            patient = Patient(
                name=patient_data.name,
                document_number=patient_data.document_number,
                bed=patient_data.bed,
                service_id=patient_data.service_id
            )
            self.db.add(patient)
            self.db.commit()
            self.db.refresh(patient)

            logger.info(f"Paciente creado: ID {patient.id} en servicio {patient.service_id}")
            return patient

        except Exception as e:
            self.db.rollback()
            logger.error(f"Error creando paciente: {e}")
            raise
