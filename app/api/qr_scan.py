"""
Endpoints de escaneo QR en puntos de control
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from app.core.database import get_db
from app.core.dependencies import get_optional_user
from app.models.medication_process import MedicationProcessStep
from app.models.qr_code import QRCodeType
from app.models.user import User
from app.schemas.qr_scan import QRScanRequest, QRScanResponse
from app.services.scan_dispatcher import DispatchContext, ScanDispatcher

router = APIRouter()


def _dispatch(
        scan: QRScanRequest,
        current_user: Optional[User],
        db: Session,
        expected_type: Optional[QRCodeType] = None,
        step: Optional[MedicationProcessStep] = None
) -> dict:
    context = DispatchContext(
        caller=current_user,
        destination_line_id=scan.destination_line_id,
        transaction_type=scan.transaction_type,
        temperature=scan.temperature,
        step_filter=step or scan.step,
        expected_type=expected_type,
    )
    result = ScanDispatcher(db).dispatch(scan.qr_id, context)
    return {
        "success": result.success,
        "message": result.message,
        "transitioned_count": result.transitioned_count,
        "line_name": result.line_name,
        "next_step_hint": result.next_step_hint,
        "step": result.step,
        "transitioned_process_ids": result.transitioned_process_ids,
        "skipped_process_ids": result.skipped_process_ids,
    }


@router.post("/dispatch", response_model=QRScanResponse)
async def dispatch_scan(
        scan: QRScanRequest,
        current_user: Optional[User] = Depends(get_optional_user),
        db: Session = Depends(get_db)
):
    """
    Registrar un escaneo en cualquier punto de control; el tipo se toma del QR
    """
    return _dispatch(scan, current_user, db)


@router.post("/pharmacy-dispatch-devolution", response_model=QRScanResponse)
async def pharmacy_dispatch_devolution(
        scan: QRScanRequest,
        current_user: Optional[User] = Depends(get_optional_user),
        db: Session = Depends(get_db)
):
    """
    Salida de farmacia de las devoluciones de una línea
    """
    return _dispatch(
        scan,
        current_user,
        db,
        expected_type=QRCodeType.PHARMACY_DISPATCH_DEVOLUTION,
        step=MedicationProcessStep.DEVOLUCION,
    )
