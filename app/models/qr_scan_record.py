# app/models/qr_scan_record.py
"""
Modelo de Registro de Escaneo QR (solo inserción)
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.core.database import Base


class QRScanRecord(Base):
    """Comprobante de una transición exitosa provocada por un escaneo"""
    __tablename__ = "qr_scan_records"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    medication_process_id = Column(Integer, ForeignKey("medication_processes.id"), nullable=False, index=True)
    qr_code_id = Column(Integer, ForeignKey("qr_codes.id"), nullable=False)
    scanned_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    daily_process_id = Column(Integer, ForeignKey("daily_processes.id"), nullable=False, index=True)

    # Contexto del escaneo
    temperature = Column(Float, nullable=True)
    destination_line_id = Column(Integer, ForeignKey("lines.id"), nullable=True)
    transaction_type = Column(String(50), nullable=True)

    scanned_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relaciones
    medication_process = relationship("MedicationProcess", back_populates="scan_records")
    qr_code = relationship("QRCode")
