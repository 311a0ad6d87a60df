"""
Directorio de líneas y servicios hospitalarios
"""
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional

from app.models.line import Line, HospitalService
from app.schemas.line import LineCreate, HospitalServiceCreate


class LineService:
    """Consulta y alta de líneas"""

    def __init__(self, db: Session):
        self.db = db

    def find_line(self, line_id: int) -> Optional[Line]:
        """Obtener línea por ID"""
        return self.db.query(Line).filter(Line.id == line_id).first()

    def get_line_by_name(self, name: str) -> Optional[Line]:
        return self.db.query(Line).filter(Line.name == name).first()

    def list_lines(self, active_only: bool = True) -> List[Line]:
        query = self.db.query(Line).options(joinedload(Line.services))
        if active_only:
            query = query.filter(Line.is_active.is_(True))
        return query.order_by(Line.name).all()

    def create_line(self, line_data: LineCreate) -> Line:
        line = Line(
            name=line_data.name,
            display_name=line_data.display_name,
            description=line_data.description
        )
        self.db.add(line)
        self.db.commit()
        self.db.refresh(line)
        return line

    def create_service(self, line_id: int, service_data: HospitalServiceCreate) -> HospitalService:
        service = HospitalService(name=service_data.name, line_id=line_id)
        self.db.add(service)
        self.db.commit()
        self.db.refresh(service)
        return service

    def get_service(self, service_id: int) -> Optional[HospitalService]:
        return self.db.query(HospitalService).filter(HospitalService.id == service_id).first()
