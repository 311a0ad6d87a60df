# app/models/__init__.py

from .user import User, UserRole
from .line import Line, HospitalService
from .patient import Patient
from .daily_process import DailyProcess
from .medication_process import MedicationProcess, MedicationProcessStep, ProcessStatus
from .qr_code import QRCode, QRCodeType
from .qr_scan_record import QRScanRecord

__all__ = [
    "User",
    "UserRole",
    "Line",
    "HospitalService",
    "Patient",
    "DailyProcess",
    "MedicationProcess",
    "MedicationProcessStep",
    "ProcessStatus",
    "QRCode",
    "QRCodeType",
    "QRScanRecord"
]
