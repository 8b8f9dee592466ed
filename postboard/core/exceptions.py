from typing import List, Optional

from fastapi import HTTPException, status

from postboard.core.response.schemas import ErrorDetail


class ServiceException(HTTPException):
    """Base class for errors raised by the service layer."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "SERVICE_ERROR"

    def __init__(
        self,
        detail: str = "Internal server error",
        error_details: Optional[List[ErrorDetail]] = None,
    ):
        super().__init__(status_code=self.status_code, detail=detail)
        self.error_details = error_details or []


class ValidationException(ServiceException):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"

    @classmethod
    def for_field(cls, field: str, message: str, code: str = "INVALID") -> "ValidationException":
        return cls(
            detail=message,
            error_details=[ErrorDetail(field=field, code=code, message=message)],
        )


class NotFoundException(ServiceException):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
