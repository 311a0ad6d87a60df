"""
Errores de dominio del flujo de procesos de medicación.

Todos los errores salvo ``StoreUnavailable`` son de cara al usuario: llevan un
mensaje en español y se responden con un 4xx. ``StoreUnavailable`` es la única
falla transitoria; se responde con 503 sin exponer detalles internos.
"""
from fastapi import status
from typing import Optional


class DispatchError(Exception):
    """Base de los errores tipados del dominio"""

    kind = "DispatchError"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "No se pudo procesar la solicitud"
    retriable = False

    def __init__(self, user_message: Optional[str] = None):
        self.user_message = user_message or self.default_message
        super().__init__(self.user_message)

    def to_dict(self) -> dict:
        return {
            "success": False,
            "kind": self.kind,
            "error": self.user_message,
        }


class InvalidToken(DispatchError):
    kind = "InvalidToken"
    default_message = "Código QR inválido o inactivo"


class Unauthorized(DispatchError):
    kind = "Unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "No autorizado"


class NoActiveBatch(DispatchError):
    kind = "NoActiveBatch"
    default_message = "No se encontró un proceso diario activo"


class UnknownLine(DispatchError):
    kind = "UnknownLine"
    default_message = "Línea de destino inválida"


class NoEligibleProcesses(DispatchError):
    kind = "NoEligibleProcesses"
    default_message = "No hay pacientes con procesos pendientes para este punto de control"


class IllegalTransition(DispatchError):
    kind = "IllegalTransition"
    status_code = status.HTTP_409_CONFLICT
    default_message = "El proceso no admite este cambio de estado"


class ProcessConflict(DispatchError):
    kind = "ProcessConflict"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Ya existe un proceso para este paciente y paso"


class StoreUnavailable(DispatchError):
    kind = "StoreUnavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Servicio no disponible temporalmente, intenta de nuevo"
    retriable = True

    def __init__(self, user_message: Optional[str] = None):
        # El detalle de la falla se registra en logs, nunca se expone
        super().__init__(self.default_message)
