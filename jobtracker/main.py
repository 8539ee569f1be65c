from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from opentelemetry import trace
from starlette.requests import Request

from jobtracker.api.router import api_router
from jobtracker.core.config import get_settings
from jobtracker.core.telemetry import configure_logging, setup_tracing, shutdown_tracing
from jobtracker.services.repository import get_repository

settings = get_settings()
configure_logging(settings)
_tracer_provider = setup_tracing(settings)
logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    repository = get_repository()
    # Refuse to serve without storage: this raises after the bounded retries.
    await repository.wait_until_ready()
    await repository.init_schema()
    try:
        yield
    finally:
        await repository.close()
        get_repository.cache_clear()
        shutdown_tracing(_tracer_provider)


app = FastAPI(title=settings.app_name, lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    started_at = time.perf_counter()
    with tracer.start_as_current_span("http.request") as span:
        span.set_attribute("http.method", request.method)
        span.set_attribute("http.target", request.url.path)
        response = await call_next(request)
        span.set_attribute("http.status_code", response.status_code)
        elapsed_ms = (time.perf_counter() - started_at) * 1000.0
        logger.info(
            "http request method=%s path=%s status=%s duration_ms=%.2f",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
    return response


app.include_router(api_router)
