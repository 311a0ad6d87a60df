"""
Modelo de Proceso Diario
"""
from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.core.database import Base


class DailyProcess(Base):
    """Un registro por día operativo; agrupa todos los procesos de medicación del día"""
    __tablename__ = "daily_processes"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, unique=True, nullable=False, index=True)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relaciones
    created_by = relationship("User")
    medication_processes = relationship("MedicationProcess", back_populates="daily_process")

    def __repr__(self):
        return f"<DailyProcess(id={self.id}, date={self.date})>"
