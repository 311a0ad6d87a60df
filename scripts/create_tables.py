#!/usr/bin/env python3
"""
Script para crear tablas de la base de datos y el usuario administrador inicial
"""
import argparse
import sys
import os

# Agregar el directorio raíz al path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import inspect

from app.core.database import SessionLocal, create_tables, check_connection, engine
from app.core.config import get_settings
from app.models.user import UserRole
from app.schemas.user import UserCreate
from app.services.auth_service import AuthService
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

EXPECTED_TABLES = [
    'users', 'lines', 'hospital_services', 'patients', 'daily_processes',
    'medication_processes', 'qr_codes', 'qr_scan_records'
]


def main(admin_email=None, admin_password=None):
    """Función principal"""
    settings = get_settings()

    logger.info("🚀 Iniciando creación de tablas para MedTrack Hospital")
    logger.info(f"📊 Entorno: {settings.ENVIRONMENT}")

    logger.info("🔗 Probando conexión...")
    if not check_connection():
        logger.error("❌ No se pudo conectar a la base de datos")
        return False

    try:
        logger.info("🔨 Creando tablas...")
        create_tables()
        verify_tables()
    except Exception as e:
        logger.error(f"❌ Error al crear tablas: {e}")
        return False

    if admin_email and admin_password:
        create_admin(admin_email, admin_password)

    return True


def verify_tables():
    """Verificar que las tablas se crearon correctamente"""
    tables = inspect(engine).get_table_names()

    logger.info("📋 Verificando tablas creadas:")
    for table in EXPECTED_TABLES:
        if table in tables:
            logger.info(f"   ✅ {table}")
        else:
            logger.warning(f"   ⚠️ {table} - No encontrada")


def create_admin(email: str, password: str):
    """Crear el administrador inicial si no existe"""
    db = SessionLocal()
    try:
        auth_service = AuthService(db)
        if auth_service.get_user_by_email(email):
            logger.info(f"👤 El administrador {email} ya existe")
            return

        auth_service.create_user(UserCreate(
            email=email,
            name="Administrador",
            password=password,
            confirm_password=password,
            role=UserRole.ADMIN.value,
        ))
        logger.info(f"👤 Administrador {email} creado")
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--admin-email")
    parser.add_argument("--admin-password")
    args = parser.parse_args()

    success = main(args.admin_email, args.admin_password)
    sys.exit(0 if success else 1)
