"""
Archivo principal de la aplicación FastAPI - MedTrack Hospital
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from app.core.config import get_settings
from app.core.database import create_tables, check_connection, get_db_info
from app.core.exceptions import DispatchError
from app.api import api_router
import logging

settings = get_settings()

# Configurar logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gestión del ciclo de vida de la aplicación"""
    # Startup
    logger.info("🚀 Iniciando MedTrack Hospital API...")
    logger.info(f"🌍 Ambiente: {settings.ENVIRONMENT}")
    logger.info(f"🔑 Debug: {settings.DEBUG}")

    if check_connection():
        logger.info("✅ Conexión a la base de datos exitosa")

        db_info = get_db_info()
        if db_info:
            logger.info(f"📊 {db_info['dialect']} - DB: {db_info['database_name']}")

        try:
            create_tables()
            logger.info("✅ Esquema de base de datos verificado")
        except Exception as e:
            logger.error(f"❌ Error al verificar esquema: {e}")
    else:
        logger.error("❌ Error de conexión a la base de datos")
        logger.warning("⚠️ La aplicación continuará pero sin base de datos")

    logger.info("🎯 MedTrack Hospital API lista para recibir requests")
    yield

    # Shutdown
    logger.info("🛑 Cerrando MedTrack Hospital API...")


def create_application() -> FastAPI:
    """Factory function para crear la aplicación FastAPI"""

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="""
## MedTrack Hospital API

Seguimiento del flujo de medicación hospitalaria por paciente y por día.

### Características principales:
- 📅 Proceso diario por día operativo
- 💊 Procesos de medicación por paciente y paso (dispensación, devolución, ...)
- 📷 Escaneo QR en puntos de control con avance en bloque por línea
- 🧾 Comprobantes de escaneo inmutables
        """,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    setup_middlewares(app)
    setup_exception_handlers(app)
    setup_routes(app)

    return app


def setup_middlewares(app: FastAPI):
    """Configurar middlewares de la aplicación"""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["*"],
    )
    logger.info(f"🌐 Orígenes permitidos: {settings.CORS_ORIGINS}")


def setup_exception_handlers(app: FastAPI):
    """Respuestas uniformes para los errores de dominio"""

    @app.exception_handler(DispatchError)
    async def dispatch_error_handler(request: Request, exc: DispatchError):
        if exc.retriable:
            logger.error(f"{exc.kind} en {request.url.path}")
        else:
            logger.warning(f"{exc.kind} en {request.url.path}: {exc.user_message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def setup_routes(app: FastAPI):
    """Configurar rutas de la aplicación"""

    @app.get("/")
    async def root():
        return {
            "message": "🏥 MedTrack Hospital API",
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
            "documentation": "/docs",
            "health": "/health",
            "api": "/api"
        }

    @app.get("/health")
    async def health_check():
        """Health check con estado de la base de datos"""
        connected = check_connection()

        health_status = {
            "status": "healthy" if connected else "unhealthy",
            "service": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "database": "connected" if connected else "disconnected",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        return JSONResponse(status_code=200 if connected else 503, content=health_status)

    app.include_router(
        api_router,
        prefix="/api"
    )

    logger.info("🛣️ Rutas configuradas correctamente")


# Crear la aplicación
app = create_application()


# Solo para desarrollo con uvicorn run
if __name__ == "__main__":
    import uvicorn

    logger.info(f"🌐 URL: http://{settings.HOST}:{settings.PORT}")
    logger.info(f"📚 Docs: http://{settings.HOST}:{settings.PORT}/docs")

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
