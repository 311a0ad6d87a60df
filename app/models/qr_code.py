"""
Modelo de Código QR de punto de control
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Enum
from sqlalchemy.sql import func
import enum

from app.core.database import Base


class QRCodeType(str, enum.Enum):
    """Tipos de QR, uno por punto de control físico"""
    PHARMACY_DISPATCH = "PHARMACY_DISPATCH"
    PHARMACY_DISPATCH_DEVOLUTION = "PHARMACY_DISPATCH_DEVOLUTION"
    SERVICE_ARRIVAL = "SERVICE_ARRIVAL"
    PHARMACY_DELIVERIES = "PHARMACY_DELIVERIES"
    DELIVERY_CONFIRMATION = "DELIVERY_CONFIRMATION"
    PROCESS_RETRY = "PROCESS_RETRY"


class QRCode(Base):
    """Modelo de Código QR. Inmutable salvo la activación."""
    __tablename__ = "qr_codes"

    id = Column(Integer, primary_key=True, index=True)
    qr_id = Column(String(64), unique=True, nullable=False, index=True)
    type = Column(Enum(QRCodeType, name="qrcodetype"), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<QRCode(id={self.id}, qr_id='{self.qr_id}', type='{self.type.value}', active={self.is_active})>"
