"""
Registro de códigos QR de puntos de control
"""
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
import secrets

from app.models.qr_code import QRCode, QRCodeType
import logging

logger = logging.getLogger(__name__)


class QRRegistry:
    """Servicio para resolver y administrar códigos QR"""

    def __init__(self, db: Session):
        self.db = db

    def resolve(self, token: str) -> Optional[QRCode]:
        """Obtener el QR por su identificador opaco"""
        if not token:
            return None
        return self.db.query(QRCode).filter(QRCode.qr_id == token).first()

    def get_by_id(self, qr_code_id: int) -> Optional[QRCode]:
        return self.db.query(QRCode).filter(QRCode.id == qr_code_id).first()

    def list(
            self,
            qr_type: Optional[QRCodeType] = None,
            active_only: bool = False
    ) -> List[QRCode]:
        """Listar QR emitidos"""
        query = self.db.query(QRCode)
        if qr_type:
            query = query.filter(QRCode.type == qr_type)
        if active_only:
            query = query.filter(QRCode.is_active.is_(True))
        return query.order_by(QRCode.id).all()

    def issue(
            self,
            qr_type: QRCodeType,
            description: Optional[str] = None,
            qr_id: Optional[str] = None
    ) -> Optional[QRCode]:
        """
        Emitir un QR nuevo; el identificador se genera si no se indica.

        Retorna None si el identificador ya está en uso.
        """
        qr_id = qr_id or secrets.token_urlsafe(16)
        qr_code = QRCode(
            qr_id=qr_id,
            type=qr_type,
            description=description,
            is_active=True
        )
        self.db.add(qr_code)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Identificador de QR duplicado: {qr_id}")
            return None
        self.db.refresh(qr_code)

        logger.info(f"QR emitido: {qr_code.qr_id} ({qr_type.value})")
        return qr_code

    def set_active(self, qr_code_id: int, is_active: bool) -> Optional[QRCode]:
        """Activar o desactivar un QR"""
        qr_code = self.get_by_id(qr_code_id)
        if not qr_code:
            return None

        qr_code.is_active = is_active
        self.db.commit()
        self.db.refresh(qr_code)

        logger.info(f"QR {qr_code.qr_id} {'activado' if is_active else 'desactivado'}")
        return qr_code
