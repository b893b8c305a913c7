"""Main FastAPI application."""
import asyncio
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from foro.api.accounts import router as accounts_router
from foro.api.events import router as events_router
from foro.api.notifications import router as notifications_router
from foro.domain.common.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from foro.settings import settings

logging.basicConfig(
    level=getattr(logging, str(settings.log_level).upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build Firebase-backed services; optionally run the fan-out listener in-process."""
    from foro.services.wiring import build_services

    services = build_services(settings)
    app.state.services = services

    listener = None
    listener_task = None
    if settings.fanout_listener_enabled and not settings.push_enabled:
        logger.warning("Fan-out listener not started: push disabled")
    elif settings.fanout_listener_enabled:
        from foro.infra.firebase.app import sync_firestore_client
        from foro.infra.jobs.tasks import PendingNotificationListener

        listener = PendingNotificationListener(
            sync_firestore_client(services.firebase_app),
            settings.pending_notifications_collection,
            services.dispatcher,
        )
        listener.start()
        listener_task = asyncio.create_task(listener.run())
        logger.info("Fan-out listener started")

    yield

    try:
        if listener is not None:
            listener.stop()
        if listener_task is not None:
            listener_task.cancel()
            try:
                await listener_task
            except asyncio.CancelledError:
                pass
        await services.event_service.wait_for_pending()
    except asyncio.CancelledError:
        logger.info("Lifespan shutdown cancelled; cleanup attempted.")
        raise


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with status and duration."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.info(
            "%s %s - %d (%.3fs)",
            request.method,
            request.url.path,
            response.status_code,
            process_time,
        )
        return response


app.add_middleware(LoggingMiddleware)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.warning("Validation error on %s %s: %d errors", request.method, request.url.path, len(errors))
    return JSONResponse(status_code=422, content={"detail": errors})


@app.exception_handler(NotFoundError)
async def domain_not_found_handler(request: Request, exc: NotFoundError):
    """Return 404 when a resource is not found."""
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(AuthorizationError)
async def domain_authorization_handler(request: Request, exc: AuthorizationError):
    """Return 403 when the caller is not allowed."""
    return JSONResponse(status_code=403, content={"detail": exc.message})


@app.exception_handler(ValidationError)
async def domain_validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.message})


@app.exception_handler(ConflictError)
async def domain_conflict_handler(request: Request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": exc.message})


app.include_router(accounts_router, prefix=settings.api_v1_prefix)
app.include_router(events_router, prefix=settings.api_v1_prefix)
app.include_router(notifications_router, prefix=settings.api_v1_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": settings.app_version}
