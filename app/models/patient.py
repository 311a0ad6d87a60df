"""
Modelo de Paciente
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.core.database import Base


class Patient(Base):
    """Modelo de Paciente hospitalizado"""
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)

    # Información personal
    name = Column(String(255), nullable=False, index=True)
    document_number = Column(String(50), unique=True, index=True, nullable=False)

    # Ubicación
    bed = Column(String(20), nullable=True)
    service_id = Column(Integer, ForeignKey("hospital_services.id"), nullable=False, index=True)

    is_active = Column(Boolean, default=True)

    # Metadatos
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relaciones
    service = relationship("HospitalService", back_populates="patients")
    medication_processes = relationship("MedicationProcess", back_populates="patient")

    def __repr__(self):
        return f"<Patient(id={self.id}, name='{self.name}', bed='{self.bed}')>"

    @property
    def line_id(self):
        """Línea del servicio donde está el paciente"""
        return self.service.line_id if self.service else None
