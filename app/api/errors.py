"""Exception handlers shared by every router."""
import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.errors import ServiceError
from app.services.logger import log_warning


async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def unhandled_error_handler(request: Request, exc: Exception):
    log_warning(f"Unhandled error on {request.method} {request.url.path}", exc)
    traceback.print_exception(type(exc), exc, exc.__traceback__)
    return JSONResponse(status_code=500, content={"message": "Server Error"})


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
