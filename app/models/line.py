"""
Modelos de Línea y Servicio hospitalario
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.core.database import Base


class Line(Base):
    """Línea: agrupación de servicios que atiende un mismo recorrido de farmacia"""
    __tablename__ = "lines"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False, index=True)  # ej: "LINEA_2"
    display_name = Column(String(255), nullable=False)  # ej: "Línea 2"
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relaciones
    services = relationship("HospitalService", back_populates="line")

    def __repr__(self):
        return f"<Line(id={self.id}, name='{self.name}')>"


class HospitalService(Base):
    """Servicio hospitalario (piso, unidad) perteneciente a una línea"""
    __tablename__ = "hospital_services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    line_id = Column(Integer, ForeignKey("lines.id"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relaciones
    line = relationship("Line", back_populates="services")
    patients = relationship("Patient", back_populates="service")

    def __repr__(self):
        return f"<HospitalService(id={self.id}, name='{self.name}', line_id={self.line_id})>"
