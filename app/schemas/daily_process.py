"""
Esquemas Pydantic para Procesos Diarios
"""
from pydantic import BaseModel
from typing import Optional
from datetime import date, datetime


class DailyProcessResponse(BaseModel):
    id: int
    date: date
    created_by_id: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
