"""
Modelo de Usuario para el sistema
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum
from sqlalchemy.sql import func
import enum

from app.core.database import Base


class UserRole(str, enum.Enum):
    """Roles de usuario (DB en MAYÚSCULAS)"""
    ADMIN = "ADMIN"
    NURSE = "NURSE"
    PHARMACY = "PHARMACY"


class User(Base):
    """Modelo de Usuario"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    hashed_password = Column(String(255), nullable=False)

    role = Column(
        Enum(UserRole, name="userrole"),
        nullable=False,
        default=UserRole.NURSE
    )

    is_active = Column(Boolean, default=True)
    phone = Column(String(20), nullable=True)

    # Metadatos
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_login = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_nurse(self) -> bool:
        return self.role == UserRole.NURSE

    @property
    def is_pharmacy(self) -> bool:
        return self.role == UserRole.PHARMACY
