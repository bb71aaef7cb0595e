"""Translation of service-layer errors into HTTP responses."""

from fastapi import HTTPException

from services.errors import ServiceError


def http_error(exc: ServiceError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)
