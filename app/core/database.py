"""
Configuración de base de datos con SQLAlchemy
"""
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
import logging

# Crear Base ANTES de importar config para evitar import circular
Base = declarative_base()

from app.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def _engine_options() -> dict:
    """Opciones del engine según el motor configurado"""
    if settings.is_sqlite:
        # TestClient y uvicorn atienden requests en hilos distintos
        return {
            "connect_args": {"check_same_thread": False},
            "echo": settings.DEBUG,
        }
    return {
        "pool_size": 20,
        "max_overflow": 30,
        "pool_pre_ping": True,
        "pool_recycle": 3600,  # Reciclar conexiones cada hora
        "echo": settings.DEBUG,
    }


engine = create_engine(settings.database_url, **_engine_options())

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    Dependency para obtener sesión de base de datos
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """
    Crear todas las tablas si no existen
    """
    try:
        # Importar todos los modelos para que se registren
        from app.models import (  # noqa: F401
            user, line, patient, daily_process, medication_process, qr_code, qr_scan_record
        )

        Base.metadata.create_all(bind=engine)
        logger.info("✅ Tablas creadas/verificadas exitosamente")

    except Exception as e:
        logger.error(f"❌ Error al crear tablas: {e}")
        raise


def check_connection() -> bool:
    """
    Probar conexión a la base de datos
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        return True
    except Exception as e:
        logger.error(f"❌ Error de conexión a la base de datos: {e}")
        return False


def get_db_info():
    """
    Obtener información de la base de datos
    """
    info = {
        "dialect": engine.dialect.name,
        "database_name": engine.url.database,
    }
    if settings.is_sqlite:
        return info

    try:
        with engine.connect() as conn:
            info["server_version"] = conn.execute(text("SELECT VERSION()")).fetchone()[0]
            info["host"] = settings.DB_HOST
            info["port"] = settings.DB_PORT
            info["charset"] = settings.DB_CHARSET
        return info
    except Exception as e:
        logger.error(f"Error al obtener info de DB: {e}")
        return None
