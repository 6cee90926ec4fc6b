from __future__ import annotations


class AppError(Exception):
    pass


class BusinessError(AppError):
    pass


class ValidationError(BusinessError):
    pass


class InfraError(AppError):
    pass


class ExternalServiceError(InfraError):
    pass


class TransportError(ExternalServiceError):
    """Fallo al leer o escribir en el origen de datos remoto."""


class TransientExternalError(ExternalServiceError):
    pass
