"""
Esquemas Pydantic para Pacientes
"""
from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime


class PatientCreate(BaseModel):
    """Esquema para crear paciente"""
    name: str = Field(..., min_length=2, max_length=255, description="Nombre completo")
    document_number: str = Field(..., min_length=3, max_length=50, description="Documento de identidad")
    bed: Optional[str] = Field(None, max_length=20, description="Cama asignada")
    service_id: int = Field(..., description="Servicio donde está hospitalizado")

    @validator('name')
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('El nombre es requerido')
        return v.strip().title()

    @validator('document_number')
    def validate_document(cls, v):
        return v.strip()


class PatientResponse(BaseModel):
    """Esquema de respuesta de paciente"""
    id: int
    name: str
    document_number: str
    bed: Optional[str] = None
    service_id: int
    line_id: Optional[int] = None
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
