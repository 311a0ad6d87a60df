"""
Endpoints de líneas y servicios hospitalarios
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from app.core.database import get_db
from app.core.dependencies import get_admin_user
from app.models.user import User
from app.schemas.line import LineCreate, LineResponse, HospitalServiceCreate, HospitalServiceResponse
from app.services.line_service import LineService

router = APIRouter()


@router.get("/", response_model=List[LineResponse])
async def list_lines(db: Session = Depends(get_db)):
    """
    Listar líneas activas con sus servicios
    """
    return LineService(db).list_lines()


@router.post("/", response_model=LineResponse, status_code=status.HTTP_201_CREATED)
async def create_line(
        line_data: LineCreate,
        current_user: User = Depends(get_admin_user),
        db: Session = Depends(get_db)
):
    """
    Crear nueva línea
    """
    line_service = LineService(db)

    if line_service.get_line_by_name(line_data.name):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Ya existe la línea {line_data.name}"
        )

    return line_service.create_line(line_data)


@router.post("/{line_id}/services", response_model=HospitalServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_service(
        line_id: int,
        service_data: HospitalServiceCreate,
        current_user: User = Depends(get_admin_user),
        db: Session = Depends(get_db)
):
    """
    Agregar un servicio hospitalario a la línea
    """
    line_service = LineService(db)

    if not line_service.find_line(line_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Línea no encontrada"
        )

    return line_service.create_service(line_id, service_data)
