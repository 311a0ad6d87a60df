"""
Endpoints de procesos diarios
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from app.core.database import get_db
from app.core.dependencies import get_current_user, get_pagination_params, PaginationParams
from app.models.user import User
from app.schemas.daily_process import DailyProcessResponse
from app.services.daily_process_service import DailyProcessService

router = APIRouter()


@router.get("/", response_model=List[DailyProcessResponse])
async def list_daily_processes(
        pagination: PaginationParams = Depends(get_pagination_params),
        db: Session = Depends(get_db)
):
    """
    Historial de procesos diarios
    """
    return DailyProcessService(db).list(skip=pagination.skip, limit=pagination.limit)


@router.get("/current", response_model=DailyProcessResponse)
async def get_current_daily_process(db: Session = Depends(get_db)):
    """
    Proceso diario de hoy
    """
    daily_process = DailyProcessService(db).current_batch()
    if not daily_process:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No se ha iniciado el proceso diario de hoy"
        )
    return daily_process


@router.post("/current", response_model=DailyProcessResponse)
async def start_current_daily_process(
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """
    Obtener o crear el proceso diario de hoy
    """
    return DailyProcessService(db).get_or_create_current(created_by_id=current_user.id)
