from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from ticketing.services.errors import (
    BusinessRuleError,
    CapacityError,
    EventNotFoundError,
    RetryableError,
    TicketingError,
    ValidationError,
)


async def rejected_purchase_handler(request: Request, exc: TicketingError) -> JSONResponse:
    logger.info(f"Request rejected: {exc}")
    content = {"success": False, "message": "Validation failed", "errors": exc.errors}
    if isinstance(exc, CapacityError):
        content["remaining_capacity"] = exc.remaining
    return JSONResponse(status_code=422, content=content)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = {str(err["loc"][-1]): err["msg"] for err in exc.errors()}
    logger.info(f"Validation error: {errors}")
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": "Validation failed", "errors": errors},
    )


async def not_found_handler(request: Request, exc: EventNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"success": False, "message": exc.message},
    )


async def retryable_error_handler(request: Request, exc: RetryableError) -> JSONResponse:
    logger.warning(f"Retryable error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"success": False, "message": exc.message, "error": exc.code.value},
        headers={"Retry-After": "1"},
    )


async def general_500_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "An unexpected error occurred", "error": str(exc)},
    )


# Exception handler mapping
EXCEPTION_HANDLERS = {
    ValidationError: rejected_purchase_handler,
    BusinessRuleError: rejected_purchase_handler,
    CapacityError: rejected_purchase_handler,
    RequestValidationError: request_validation_handler,
    EventNotFoundError: not_found_handler,
    RetryableError: retryable_error_handler,
    Exception: general_500_exception_handler,  # Catch-all for unhandled exceptions
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
