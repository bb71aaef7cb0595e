"""Domain exceptions shared by the service layer."""


class ServiceError(Exception):
    """Base exception for all service errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Missing or malformed input, including unknown item types."""

    status_code = 422


class ForbiddenError(ServiceError):
    """Requester is not the owner of the resource."""

    status_code = 403


class NotFoundError(ServiceError):
    """Rating, item or user id does not resolve."""

    status_code = 404


class ConflictError(ServiceError):
    """Uniqueness violation or state transition that already happened."""

    status_code = 409
