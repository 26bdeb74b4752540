# storefront/api/errors.py
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from storefront.domain.errors import AppError, InternalError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(
        f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}"
    )
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # szczegoly tylko do logu, klient dostaje ogolny komunikat
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content=InternalError("Internal server error").to_dict())


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
