"""
Servicio de procesos diarios (día operativo)
"""
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from app.core.config import get_settings
from app.models.daily_process import DailyProcess
import logging

logger = logging.getLogger(__name__)


class DailyProcessService:
    """Resuelve el lote del día operativo"""

    def __init__(self, db: Session):
        self.db = db
        self.tz = ZoneInfo(get_settings().DEFAULT_TIMEZONE)

    def operating_date(self, now: Optional[datetime] = None) -> date:
        """Fecha operativa en la zona horaria del hospital"""
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            # Fechas sin zona se interpretan como hora local del hospital
            return now.date()
        return now.astimezone(self.tz).date()

    def current_batch(self, now: Optional[datetime] = None) -> Optional[DailyProcess]:
        """Proceso diario de hoy, None si aún no se ha creado"""
        return self.db.query(DailyProcess).filter(
            DailyProcess.date == self.operating_date(now)
        ).first()

    def get_by_id(self, daily_process_id: int) -> Optional[DailyProcess]:
        return self.db.query(DailyProcess).filter(DailyProcess.id == daily_process_id).first()

    def get_or_create_current(
            self,
            now: Optional[datetime] = None,
            created_by_id: Optional[int] = None
    ) -> DailyProcess:
        """Obtener o crear el proceso diario de hoy (idempotente)"""
        existing = self.current_batch(now)
        if existing:
            return existing

        daily_process = DailyProcess(date=self.operating_date(now), created_by_id=created_by_id)
        self.db.add(daily_process)
        try:
            self.db.commit()
        except IntegrityError:
            # Otro request lo creó primero
            self.db.rollback()
            return self.current_batch(now)

        self.db.refresh(daily_process)
        logger.info(f"Proceso diario creado para {daily_process.date} (ID {daily_process.id})")
        return daily_process

    def list(self, skip: int = 0, limit: int = 30) -> List[DailyProcess]:
        """Listar procesos diarios, más recientes primero"""
        return (
            self.db.query(DailyProcess)
            .order_by(DailyProcess.date.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
