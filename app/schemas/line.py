"""
Esquemas Pydantic para Líneas y Servicios
"""
from pydantic import BaseModel, Field, validator
from typing import List, Optional


class HospitalServiceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Nombre del servicio")


class HospitalServiceResponse(BaseModel):
    id: int
    name: str
    line_id: int

    class Config:
        from_attributes = True


class LineCreate(BaseModel):
    """Esquema para crear línea"""
    name: str = Field(..., min_length=1, max_length=50, description="Código de la línea")
    display_name: str = Field(..., min_length=1, max_length=255, description="Nombre visible")
    description: Optional[str] = Field(None, max_length=1000)

    @validator('name')
    def normalize_name(cls, v):
        return v.strip().upper().replace(" ", "_")


class LineResponse(BaseModel):
    id: int
    name: str
    display_name: str
    description: Optional[str] = None
    is_active: bool
    services: List[HospitalServiceResponse] = []

    class Config:
        from_attributes = True
