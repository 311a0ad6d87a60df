"""
Endpoints de pacientes
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core.database import get_db
from app.core.dependencies import get_nurse_user, get_pagination_params, PaginationParams
from app.models.user import User
from app.schemas.patient import PatientCreate, PatientResponse
from app.services.line_service import LineService
from app.services.patient_service import PatientService

router = APIRouter()


@router.get("/", response_model=List[PatientResponse])
async def list_patients(
        pagination: PaginationParams = Depends(get_pagination_params),
        line_id: Optional[int] = Query(None, description="Filtrar por línea"),
        service_id: Optional[int] = Query(None, description="Filtrar por servicio"),
        db: Session = Depends(get_db)
):
    """
    Listar pacientes hospitalizados
    """
    return PatientService(db).get_patients(
        skip=pagination.skip,
        limit=pagination.limit,
        line_id=line_id,
        service_id=service_id
    )


@router.post("/", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def create_patient(
        patient_data: PatientCreate,
        current_user: User = Depends(get_nurse_user),
        db: Session = Depends(get_db)
):
    """
    Registrar paciente
    """
    patient_service = PatientService(db)

    if not LineService(db).get_service(patient_data.service_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Servicio inválido"
        )

    if patient_service.get_patient_by_document(patient_data.document_number):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Ya existe un paciente con ese documento"
        )

    return patient_service.create_patient(patient_data)


@router.get("/{patient_id}", response_model=PatientResponse)
async def get_patient(
        patient_id: int,
        db: Session = Depends(get_db)
):
    """
    Obtener paciente por ID
    """
    patient = PatientService(db).get_patient_by_id(patient_id)
    if not patient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Paciente no encontrado"
        )
    return patient
