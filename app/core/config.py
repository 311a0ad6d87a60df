"""
Configuración de la aplicación (MySQL por defecto, cualquier URL de SQLAlchemy vía DATABASE_URL)
"""
from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # Información del proyecto
    PROJECT_NAME: str = Field(default="MedTrack Hospital API")
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="production")
    DEBUG: bool = Field(default=False)

    # Configuración del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8081)

    # Seguridad
    SECRET_KEY: str
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=480)  # un turno de enfermería

    # Base de datos MySQL
    DB_HOST: str = Field(default="localhost")
    DB_PORT: int = Field(default=3306)
    DB_NAME: str = Field(default="medtrack")
    DB_USER: str = Field(default="medtrack_user")
    DB_PASSWORD: str = Field(default="")
    DB_CHARSET: str = Field(default="utf8mb4")

    # URL completa; si se define reemplaza la de MySQL
    DATABASE_URL: Optional[str] = Field(default=None)

    # CORS
    CORS_ORIGINS: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173"
        ]
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    # Zona horaria del día operativo del hospital
    DEFAULT_TIMEZONE: str = Field(default="America/Bogota")

    @property
    def database_url(self) -> str:
        """Construir URL de conexión"""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            f"?charset={self.DB_CHARSET}"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def is_production(self) -> bool:
        """Verificar si estamos en producción"""
        return self.ENVIRONMENT.lower() == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Obtener configuración con cache"""
    return Settings()
