"""
Servicio de autenticación
"""
from sqlalchemy.orm import Session
from datetime import datetime, timezone
from typing import Optional

from app.models.user import User, UserRole
from app.schemas.user import UserCreate
from app.core.security import get_password_hash, verify_password


class AuthService:
    """Servicio para manejo de autenticación"""

    def __init__(self, db: Session):
        self.db = db

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Obtener usuario por email"""
        return self.db.query(User).filter(User.email == email).first()

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Obtener usuario por ID"""
        return self.db.query(User).filter(User.id == user_id).first()

    def create_user(self, user_data: UserCreate) -> User:
        """Crear nuevo usuario"""
        db_user = User(
            email=user_data.email,
            name=user_data.name,
            hashed_password=get_password_hash(user_data.password),
            role=UserRole(user_data.role),
            phone=user_data.phone
        )

        self.db.add(db_user)
        self.db.commit()
        self.db.refresh(db_user)

        return db_user

    def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """Autenticar usuario"""
        user = self.get_user_by_email(email)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    def update_last_login(self, user_id: int):
        """Actualizar último login"""
        user = self.get_user_by_id(user_id)
        if user:
            user.last_login = datetime.now(timezone.utc)
            self.db.commit()
