"""
Endpoints de administración de códigos QR
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core.database import get_db
from app.core.dependencies import get_admin_user
from app.models.qr_code import QRCodeType
from app.models.user import User
from app.schemas.qr_code import QRCodeCreate, QRCodeActivation, QRCodeResponse
from app.services.qr_registry import QRRegistry

router = APIRouter()


@router.get("/", response_model=List[QRCodeResponse])
async def list_qr_codes(
        qr_type: Optional[QRCodeType] = Query(None, alias="type", description="Filtrar por tipo"),
        active_only: bool = Query(False),
        current_user: User = Depends(get_admin_user),
        db: Session = Depends(get_db)
):
    """
    Listar códigos QR emitidos
    """
    return QRRegistry(db).list(qr_type=qr_type, active_only=active_only)


@router.post("/", response_model=QRCodeResponse, status_code=status.HTTP_201_CREATED)
async def issue_qr_code(
        qr_data: QRCodeCreate,
        current_user: User = Depends(get_admin_user),
        db: Session = Depends(get_db)
):
    """
    Emitir un código QR para un punto de control
    """
    qr_code = QRRegistry(db).issue(qr_data.type, description=qr_data.description, qr_id=qr_data.qr_id)
    if not qr_code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Ya existe un QR con ese identificador"
        )
    return qr_code


@router.patch("/{qr_code_id}/activation", response_model=QRCodeResponse)
async def set_qr_code_activation(
        qr_code_id: int,
        activation: QRCodeActivation,
        current_user: User = Depends(get_admin_user),
        db: Session = Depends(get_db)
):
    """
    Activar o desactivar un código QR
    """
    qr_code = QRRegistry(db).set_active(qr_code_id, activation.is_active)
    if not qr_code:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Código QR no encontrado"
        )
    return qr_code
