"""
Esquemas Pydantic para Usuario y Autenticación
"""
from pydantic import BaseModel, EmailStr, validator
from typing import Optional
from datetime import datetime
from app.models.user import UserRole


class UserCreate(BaseModel):
    """Esquema para crear usuario"""
    email: EmailStr
    name: str
    password: str
    confirm_password: str
    role: str = "NURSE"
    phone: Optional[str] = None

    @validator('password')
    def validate_password(cls, v):
        if len(v) < 8:
            raise ValueError('La contraseña debe tener al menos 8 caracteres')
        return v

    @validator('confirm_password')
    def passwords_match(cls, v, values):
        if 'password' in values and v != values['password']:
            raise ValueError('Las contraseñas no coinciden')
        return v

    @validator('role')
    def validate_role(cls, v):
        # Normalizar a MAYÚSCULAS del enum
        try:
            return UserRole[v.upper()].value
        except KeyError:
            raise ValueError('Rol inválido')


class UserResponse(BaseModel):
    """Esquema de respuesta de usuario"""
    id: int
    email: str
    name: str
    role: UserRole
    phone: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    """Esquema de respuesta de login"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
