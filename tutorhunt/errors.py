"""
Error responses. Every failure is rendered as {"success": false, "message": ...}
with the status code of the exception that caused it.
"""
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from tutorhunt.logger import logger

def error_body(message, **extra) -> dict:
    return {"success": False, "message": message, **extra}

def register_error_handlers(app: FastAPI) -> None:
    # Also catches fastapi.HTTPException and slowapi's RateLimitExceeded, both subclass it
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            error_body(exc.detail),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            error_body("Invalid request", errors=jsonable_encoder(exc.errors())),
            status_code=422,
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error(f"Database error on {request.method} {request.url.path}: {str(exc)}")
        return JSONResponse(error_body("Database error"), status_code=500)
