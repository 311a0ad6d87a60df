"""
Esquemas Pydantic para Códigos QR
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.models.qr_code import QRCodeType


class QRCodeCreate(BaseModel):
    type: QRCodeType
    description: Optional[str] = Field(None, max_length=1000)
    qr_id: Optional[str] = Field(None, min_length=4, max_length=64, description="Se genera si se omite")


class QRCodeActivation(BaseModel):
    is_active: bool


class QRCodeResponse(BaseModel):
    id: int
    qr_id: str
    type: QRCodeType
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
