from __future__ import annotations

from dataclasses import dataclass

from planificador.core.errors import BusinessError, InfraError, TransientExternalError
from planificador.core.observability import get_correlation_id
from planificador.domain.sheets_errors import (
    SheetsConfigError,
    SheetsCredentialsError,
    SheetsNotFoundError,
    SheetsPermissionError,
)


@dataclass(frozen=True)
class UiErrorMessage:
    title: str
    probable_cause: str
    recommended_action: str
    severity: str

    incident_id: str | None = None

    def as_text(self) -> str:
        body = (
            f"{self.title}\n"
            f"Causa probable: {self.probable_cause}\n"
            f"Acción recomendada: {self.recommended_action}"
        )
        if self.incident_id:
            body = f"{body}\nID de incidente: {self.incident_id}"
        return body


def _infra_message(error: InfraError, incident_id: str | None) -> UiErrorMessage:
    if isinstance(error, SheetsPermissionError):
        cause = "La cuenta de servicio no tiene acceso al libro."
        action = "Comparte la hoja con el email de la cuenta de servicio y reintenta."
    elif isinstance(error, SheetsNotFoundError):
        cause = "El libro o alguna de sus pestañas no existe."
        action = "Revisa el ID de la spreadsheet y los nombres de las hojas."
    elif isinstance(error, SheetsCredentialsError):
        cause = "Las credenciales JSON no son válidas o no se encuentran."
        action = "Selecciona de nuevo el archivo de credenciales."
    elif isinstance(error, SheetsConfigError):
        cause = str(error).strip() or "La conexión con Google Sheets no está configurada."
        action = "Revisa la configuración de Google Sheets."
    elif isinstance(error, TransientExternalError):
        cause = "Google Sheets ha rechazado temporalmente la petición."
        action = "Espera unos segundos y reintenta; los cambios pendientes se conservan."
    else:
        cause = "No fue posible acceder a los datos o al servicio externo."
        action = "Reintenta. Si persiste, revisa la configuración o contacta soporte."
    return UiErrorMessage(
        title="No se pudo completar la operación",
        probable_cause=cause,
        recommended_action=action,
        severity="blocking",
        incident_id=incident_id,
    )


def map_error_to_ui_message(error: Exception, *, incident_id: str | None = None) -> UiErrorMessage:
    resolved_incident_id = incident_id or get_correlation_id()
    if isinstance(error, BusinessError):
        message = str(error).strip() or "No se pudo completar la operación"
        return UiErrorMessage(
            title=message,
            probable_cause="Los datos introducidos no cumplen una regla de negocio.",
            recommended_action="Corrige los datos marcados y reintenta.",
            severity="warning",
            incident_id=resolved_incident_id,
        )
    if isinstance(error, InfraError):
        return _infra_message(error, resolved_incident_id)
    return UiErrorMessage(
        title="Ocurrió un error inesperado.",
        probable_cause="Se produjo un fallo técnico no identificado.",
        recommended_action="Reintenta. Si persiste, contacta soporte.",
        severity="blocking",
        incident_id=resolved_incident_id,
    )


def map_error_to_user_message(error: Exception, *, incident_id: str | None = None) -> str:
    return map_error_to_ui_message(error, incident_id=incident_id).as_text()
