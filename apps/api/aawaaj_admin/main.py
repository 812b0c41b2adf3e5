from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from aawaaj_admin.api.errors import register_error_handlers
from aawaaj_admin.api.routes import router as api_router
from aawaaj_admin.core.config import get_settings
from aawaaj_admin.logging import configure_logging
from aawaaj_admin.middleware.correlation_id import CorrelationIdMiddleware
from aawaaj_admin.middleware.request_logging import RequestLoggingMiddleware
from aawaaj_admin.otel import setup_otel


configure_logging()
logger = logging.getLogger("aawaaj.app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if not settings.supabase_service_role_key:
        logger.warning("app.admin_api_unconfigured", extra={"operation": "startup"})
    logger.info("app.started", extra={"operation": "startup"})
    yield


app = FastAPI(title="Aawaaj Admin API", version="0.1.0", lifespan=lifespan)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)
register_error_handlers(app)
app.include_router(api_router)

settings = get_settings()
if settings.otel_enabled:
    setup_otel(settings, app.version)

if not getattr(app, "_is_instrumented_by_opentelemetry", False):
    FastAPIInstrumentor().instrument_app(app)
