"""
Typed service errors.

Services raise these; the API layer renders them with their status code.
"""


class ServiceError(Exception):
    """Base class for errors surfaced to API clients"""
    status_code = 500

    def __init__(self, message: str, detail=None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self) -> dict:
        return {"message": self.message, "detail": self.detail}


class NotFoundError(ServiceError):
    """Referenced entity does not exist"""
    status_code = 404


class ConflictError(ServiceError):
    """Unique field already taken"""
    status_code = 409


class NotAcceptableError(ServiceError):
    """Business rule rejected the request"""
    status_code = 406


class UnauthorizedError(ServiceError):
    status_code = 401


class ForbiddenError(ServiceError):
    status_code = 403


class PaymentProviderError(ServiceError):
    """Payment provider returned an error"""
    status_code = 502


class ServiceUnavailableError(ServiceError):
    status_code = 503


class InternalError(ServiceError):
    status_code = 500
