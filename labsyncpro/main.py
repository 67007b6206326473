import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .db import create_db_and_tables
from .logging_config import configure_logging
from .routers import assignments, auth, capacity, classes, groups, labs, schedules
from .services.errors import ServiceError
from .services.schedule_services import ScheduleConflictError

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    create_db_and_tables()
    log.info("%s started", settings.APP_NAME)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


def _clean(message: str) -> str:
    return message.removeprefix("Value error, ")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "; ".join(_clean(str(e.get("msg", ""))) for e in errors) or "Invalid request"
    return JSONResponse({"error": message, "errors": jsonable_encoder(errors)}, status_code=400)


@app.exception_handler(ScheduleConflictError)
async def schedule_conflict_handler(request: Request, exc: ScheduleConflictError):
    return JSONResponse(jsonable_encoder(exc.conflict), status_code=exc.status_code)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 409:
        log.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


prefix = settings.API_PREFIX
app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["auth"])
app.include_router(labs.router, prefix=f"{prefix}/labs", tags=["labs"])
app.include_router(classes.router, prefix=f"{prefix}/classes", tags=["classes"])
app.include_router(schedules.router, prefix=f"{prefix}/schedules", tags=["schedules"])
app.include_router(assignments.router, prefix=f"{prefix}/assignments", tags=["assignments"])
app.include_router(capacity.router, prefix=f"{prefix}/capacity", tags=["capacity"])
app.include_router(groups.router, prefix=f"{prefix}/groups", tags=["groups"])


@app.get(f"{prefix}/health")
async def health():
    return {"status": "ok"}
