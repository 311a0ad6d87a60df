"""
Dependencias globales de la aplicación
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from typing import Optional

from app.core.database import get_db
from app.core.security import user_id_from_token
from app.models.user import User, UserRole
from app.services.auth_service import AuthService

# Configurar OAuth2
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="api/auth/login",
    auto_error=False
)


async def get_optional_user(
        token: Optional[str] = Depends(oauth2_scheme),
        db: Session = Depends(get_db)
) -> Optional[User]:
    """
    Obtener usuario actual si existe token válido, sino None
    """
    if not token:
        return None

    user_id = user_id_from_token(token)
    if user_id is None:
        return None

    user = AuthService(db).get_user_by_id(user_id)
    return user if user and user.is_active else None


async def get_current_user(
        current_user: Optional[User] = Depends(get_optional_user)
) -> User:
    """
    Obtener usuario actual del token JWT
    """
    if current_user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No se pudo validar las credenciales",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user


async def get_admin_user(
        current_user: User = Depends(get_current_user)
) -> User:
    """
    Verificar que el usuario sea administrador
    """
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No tienes permisos de administrador"
        )
    return current_user


async def get_nurse_user(
        current_user: User = Depends(get_current_user)
) -> User:
    """
    Verificar que el usuario sea de enfermería o admin
    """
    if current_user.role not in [UserRole.NURSE, UserRole.ADMIN]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No tienes permisos para gestionar procesos de medicación"
        )
    return current_user


# Dependencias para paginación
class PaginationParams:
    def __init__(self, skip: int = 0, limit: int = 100):
        self.skip = max(0, skip)
        self.limit = min(limit, 1000)  # Máximo 1000 registros por página


def get_pagination_params(skip: int = 0, limit: int = 100) -> PaginationParams:
    """
    Parámetros de paginación
    """
    return PaginationParams(skip=skip, limit=limit)
