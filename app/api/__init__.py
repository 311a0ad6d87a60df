# app/api/__init__.py
"""
Router principal de la API
"""
from fastapi import APIRouter, Depends
from app.core.dependencies import get_current_user

from . import auth, lines, patients, daily_processes, medication_processes, qr_codes, qr_scan

# Router principal de la API
api_router = APIRouter()

api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["authentication"]
)

api_router.include_router(
    lines.router,
    prefix="/lines",
    tags=["lines"],
    dependencies=[Depends(get_current_user)]
)

api_router.include_router(
    patients.router,
    prefix="/patients",
    tags=["patients"],
    dependencies=[Depends(get_current_user)]
)

api_router.include_router(
    daily_processes.router,
    prefix="/daily-processes",
    tags=["daily-processes"],
    dependencies=[Depends(get_current_user)]
)

api_router.include_router(
    medication_processes.router,
    prefix="/medication-processes",
    tags=["medication-processes"],
    dependencies=[Depends(get_current_user)]
)

api_router.include_router(
    qr_codes.router,
    prefix="/qr-codes",
    tags=["qr-codes"],
    dependencies=[Depends(get_current_user)]
)

# La identidad del escaneo la valida el despachador (Unauthorized tipado)
api_router.include_router(
    qr_scan.router,
    prefix="/qr-scan",
    tags=["qr-scan"]
)
