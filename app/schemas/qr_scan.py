"""
Esquemas Pydantic para escaneos QR
"""
from pydantic import BaseModel, Field, validator
from typing import List, Optional

from app.models.medication_process import MedicationProcessStep


class QRScanRequest(BaseModel):
    """Datos enviados por el lector en un punto de control"""
    qr_id: str = Field(..., min_length=1, description="Identificador del QR escaneado")
    temperature: float = Field(..., description="Temperatura de la nevera/contenedor en °C")
    destination_line_id: int = Field(..., description="Línea de destino")
    transaction_type: str = Field(..., min_length=1, max_length=50, description="Tipo de transacción")
    step: Optional[MedicationProcessStep] = Field(None, description="Paso del flujo; por defecto el del punto de control")

    @validator('qr_id', 'transaction_type')
    def strip_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('El campo es requerido')
        return v

    @validator('temperature')
    def validate_temperature(cls, v):
        if not -50.0 <= v <= 60.0:
            raise ValueError('Temperatura fuera de rango')
        return v


class QRScanResponse(BaseModel):
    success: bool
    message: str
    transitioned_count: int
    line_name: str
    next_step_hint: str
    step: MedicationProcessStep
    transitioned_process_ids: List[int] = []
    skipped_process_ids: List[int] = []
