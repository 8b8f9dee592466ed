from typing import Any, List, Optional

from fastapi import Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from postboard.core.exceptions import ServiceException
from postboard.core.logger import get_logger
from postboard.core.response.schemas import ErrorDetail, ErrorResponse, PageResponse

logger = get_logger("response")


def success_response(data: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Render a single resource as the response body."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True)
    return JSONResponse(content=jsonable_encoder(data), status_code=status_code)


def paginated_response(page: PageResponse) -> JSONResponse:
    return JSONResponse(
        content=page.model_dump(mode="json", by_alias=True),
        status_code=status.HTTP_200_OK,
    )


def no_content_response() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def error_response(
    error_code: str,
    message: str,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    details: Optional[List[dict]] = None,
) -> JSONResponse:
    body = ErrorResponse(
        message=message,
        error_code=error_code,
        error_details=[ErrorDetail(**d) for d in details or []],
    )
    return JSONResponse(content=body.model_dump(mode="json"), status_code=status_code)


async def service_exception_handler(request: Request, exc: ServiceException) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
        message = "Internal server error"
    else:
        message = str(exc.detail)
    return error_response(
        error_code=exc.error_code,
        message=message,
        status_code=exc.status_code,
        details=[detail.model_dump() for detail in exc.error_details],
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed requests (missing params, bad ids, bad bodies) as 400."""
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        details.append(
            {
                "field": ".".join(loc),
                "code": str(error.get("type", "invalid")).upper(),
                "message": str(error.get("msg", "Invalid value")),
            }
        )
    return error_response(
        error_code="VALIDATION_ERROR",
        message="Invalid request parameters",
        status_code=status.HTTP_400_BAD_REQUEST,
        details=details,
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(
        error_code="SERVICE_ERROR",
        message="Internal server error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
