# barbershop/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import get_settings
from .db import create_db_and_tables
from .errors import PersistenceError, SchedulingError
from .logging_config import configure_logging
from .routers import appointments_routes, barbers_routes, scheduling_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings().log_level)
    create_db_and_tables()
    logger.info("Barbershop API started")
    yield
    logger.info("Barbershop API shutting down")


app = FastAPI(title="Barbershop Scheduling API", lifespan=lifespan)

app.include_router(barbers_routes.router)
app.include_router(scheduling_routes.router)
app.include_router(appointments_routes.router)


@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError):
    if isinstance(exc, PersistenceError):
        # already logged with traceback where it was raised
        message = "Something went wrong, please try again later"
    else:
        message = exc.message
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": message},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    problems = []
    for error in exc.errors():
        # drop the "body"/"query" prefix, keep the field path
        field = ".".join(str(part) for part in error.get("loc", ())[1:])
        problems.append(f"{field}: {error.get('msg')}" if field else error.get("msg"))

    logger.warning("Validation error for %s: %s", request.url.path, problems)
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "; ".join(problems)},
    )


@app.get("/health")
def health_check():
    return {"status": "ok"}
