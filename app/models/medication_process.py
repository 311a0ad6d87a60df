"""
Modelo de Proceso de Medicación
"""
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, validates
import enum

from app.core.database import Base


class MedicationProcessStep(str, enum.Enum):
    """Pasos del flujo de medicación"""
    DISPENSACION = "DISPENSACION"
    ALISTAMIENTO = "ALISTAMIENTO"
    VALIDACION = "VALIDACION"
    ENTREGA = "ENTREGA"
    DEVOLUCION = "DEVOLUCION"


class ProcessStatus(str, enum.Enum):
    """Estados de un proceso de medicación"""
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    DISPATCHED_FROM_PHARMACY = "DISPATCHED_FROM_PHARMACY"
    DELIVERED = "DELIVERED"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"


class MedicationProcess(Base):
    """Un paso del flujo para un paciente dentro de un proceso diario"""
    __tablename__ = "medication_processes"
    __table_args__ = (
        # NULL no colisiona: solo puede haber un proceso abierto por paciente, paso y día
        UniqueConstraint(
            "patient_id", "step", "daily_process_id", "open_slot",
            name="uq_medication_process_open_slot"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    daily_process_id = Column(Integer, ForeignKey("daily_processes.id"), nullable=False, index=True)
    step = Column(Enum(MedicationProcessStep, name="medicationprocessstep"), nullable=False, index=True)
    # Solo se escribe al crear; después únicamente vía ProcessStore.compare_and_set_status
    status = Column(
        Enum(ProcessStatus, name="processstatus"),
        nullable=False,
        default=ProcessStatus.IN_PROGRESS,
        index=True
    )
    # 1 mientras el proceso no esté COMPLETED, NULL después
    open_slot = Column(Integer, nullable=True, default=1)
    notes = Column(Text, nullable=True)
    started_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Metadatos
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relaciones
    patient = relationship("Patient", back_populates="medication_processes")
    daily_process = relationship("DailyProcess", back_populates="medication_processes")
    started_by = relationship("User")
    scan_records = relationship("QRScanRecord", back_populates="medication_process")

    def __repr__(self):
        return (
            f"<MedicationProcess(id={self.id}, patient_id={self.patient_id}, "
            f"step='{self.step.value}', status='{self.status.value}')>"
        )

    @staticmethod
    def open_slot_for(status: ProcessStatus):
        return None if status == ProcessStatus.COMPLETED else 1

    @validates("status")
    def _sync_open_slot(self, key, value):
        self.open_slot = self.open_slot_for(value)
        return value
