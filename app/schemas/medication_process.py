"""
Esquemas Pydantic para Procesos de Medicación
"""
from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime

from app.models.medication_process import MedicationProcessStep, ProcessStatus
from app.services.state_machine import ProcessAction


class MedicationProcessCreate(BaseModel):
    """Esquema para iniciar un proceso"""
    patient_id: int
    step: MedicationProcessStep
    daily_process_id: Optional[int] = Field(None, description="Por defecto el proceso diario de hoy")
    status: ProcessStatus = Field(ProcessStatus.IN_PROGRESS, description="IN_PROGRESS o PENDING")
    notes: Optional[str] = Field(None, max_length=2000)

    @validator('status')
    def validate_initial_status(cls, v):
        if v not in (ProcessStatus.IN_PROGRESS, ProcessStatus.PENDING):
            raise ValueError('Un proceso solo puede crearse en IN_PROGRESS o PENDING')
        return v


class MedicationProcessUpdate(BaseModel):
    """Actualización de datos que no son el estado"""
    notes: Optional[str] = Field(None, max_length=2000)


class MedicationProcessActionRequest(BaseModel):
    """Acción manual sobre el estado del proceso"""
    action: ProcessAction
    notes: Optional[str] = Field(None, max_length=2000)

    @validator('notes', always=True)
    def notes_required_for_error(cls, v, values):
        if values.get('action') == ProcessAction.REPORT_ERROR and not (v and v.strip()):
            raise ValueError('Describe el error en las notas')
        return v


class MedicationProcessResponse(BaseModel):
    id: int
    patient_id: int
    daily_process_id: int
    step: MedicationProcessStep
    status: ProcessStatus
    notes: Optional[str] = None
    started_by_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ScanRecordResponse(BaseModel):
    id: int
    patient_id: int
    medication_process_id: int
    qr_code_id: int
    scanned_by_id: int
    daily_process_id: int
    temperature: Optional[float] = None
    destination_line_id: Optional[int] = None
    transaction_type: Optional[str] = None
    scanned_at: Optional[datetime] = None

    class Config:
        from_attributes = True
