"""
Endpoints de procesos de medicación
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core.database import get_db
from app.core.dependencies import (
    get_nurse_user,
    get_pagination_params,
    PaginationParams
)
from app.models.medication_process import MedicationProcessStep, ProcessStatus
from app.models.user import User
from app.schemas.medication_process import (
    MedicationProcessCreate,
    MedicationProcessUpdate,
    MedicationProcessActionRequest,
    MedicationProcessResponse,
    ScanRecordResponse
)
from app.services.medication_process_service import MedicationProcessService
from app.services.patient_service import PatientService

router = APIRouter()


def _get_process_or_404(service: MedicationProcessService, process_id: int):
    process = service.get_process_by_id(process_id)
    if not process:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="El proceso no fue encontrado"
        )
    return process


@router.get("/", response_model=List[MedicationProcessResponse])
async def list_medication_processes(
        pagination: PaginationParams = Depends(get_pagination_params),
        patient_id: Optional[int] = Query(None, description="Filtrar por paciente"),
        step: Optional[MedicationProcessStep] = Query(None, description="Filtrar por paso"),
        status_filter: Optional[ProcessStatus] = Query(None, alias="status", description="Filtrar por estado"),
        daily_process_id: Optional[int] = Query(None, description="Filtrar por proceso diario"),
        db: Session = Depends(get_db)
):
    """
    Listar procesos de medicación
    """
    return MedicationProcessService(db).get_processes(
        skip=pagination.skip,
        limit=pagination.limit,
        patient_id=patient_id,
        step=step,
        status=status_filter,
        daily_process_id=daily_process_id
    )


@router.post("/", response_model=MedicationProcessResponse, status_code=status.HTTP_201_CREATED)
async def create_medication_process(
        process_data: MedicationProcessCreate,
        current_user: User = Depends(get_nurse_user),
        db: Session = Depends(get_db)
):
    """
    Iniciar un proceso de medicación para un paciente
    """
    if not PatientService(db).get_patient_by_id(process_data.patient_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Paciente no encontrado"
        )

    return MedicationProcessService(db).create_process(process_data, started_by_id=current_user.id)


@router.get("/{process_id}", response_model=MedicationProcessResponse)
async def get_medication_process(
        process_id: int,
        db: Session = Depends(get_db)
):
    """
    Obtener un proceso de medicación
    """
    return _get_process_or_404(MedicationProcessService(db), process_id)


@router.patch("/{process_id}", response_model=MedicationProcessResponse)
async def update_medication_process(
        process_id: int,
        process_update: MedicationProcessUpdate,
        current_user: User = Depends(get_nurse_user),
        db: Session = Depends(get_db)
):
    """
    Actualizar notas del proceso (el estado solo cambia vía acciones o escaneos)
    """
    service = MedicationProcessService(db)
    process = _get_process_or_404(service, process_id)
    return service.update_notes(process, process_update.notes)


@router.post("/{process_id}/actions", response_model=MedicationProcessResponse)
async def apply_medication_process_action(
        process_id: int,
        action_request: MedicationProcessActionRequest,
        current_user: User = Depends(get_nurse_user),
        db: Session = Depends(get_db)
):
    """
    Iniciar, completar, reportar error o reintentar un proceso
    """
    service = MedicationProcessService(db)
    process = _get_process_or_404(service, process_id)
    return service.apply_action(process, action_request.action, notes=action_request.notes)


@router.get("/{process_id}/scans", response_model=List[ScanRecordResponse])
async def list_medication_process_scans(
        process_id: int,
        db: Session = Depends(get_db)
):
    """
    Comprobantes de escaneo del proceso
    """
    service = MedicationProcessService(db)
    _get_process_or_404(service, process_id)
    return service.get_scan_records(process_id)
