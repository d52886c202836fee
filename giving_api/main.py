from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog
import uvicorn

from giving_api.core.config import get_settings
from giving_api.core.errors import ServiceError
from giving_api.core.logging import configure_logging
from giving_api.database.database import init_db, close_db
from giving_api.api.health import router as health_router
from giving_api.api.donations import router as donations_router
from giving_api.api.campaigns import router as campaigns_router
from giving_api.api.persons import router as persons_router
from giving_api.kafka.producer import kafka_producer
from giving_api.middleware.tracing import init_tracing
from giving_api.middleware.metrics import MetricsMiddleware
from giving_api.middleware.logging import logging_middleware

configure_logging()

logger = structlog.get_logger(__name__)
settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Donation platform API: campaigns, vaults, donations and checkout sessions",
    version="1.0.0",
    debug=settings.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Must run before startup so the FastAPI instrumentation wraps the app
init_tracing(app)

app.add_middleware(MetricsMiddleware)
app.middleware("http")(logging_middleware)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Typed service errors keep their status code and message"""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "Request failed",
        error=exc.message,
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        method=request.method,
        path=request.url.path
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        method=request.method,
        path=request.url.path
    )
    return JSONResponse(
        status_code=500,
        content={
            "message": "Internal server error",
            "detail": "An unexpected error occurred"
        }
    )


@app.on_event("startup")
async def startup_event():
    logger.info("Starting Giving Service", service_name=settings.service_name)

    try:
        await init_db()
    except Exception as e:
        logger.error("Database initialization failed, aborting startup", error=str(e))
        raise

    if not settings.kafka_enabled:
        logger.info("Kafka disabled by configuration, donation events will not be published")
        return

    try:
        await kafka_producer.start()
    except Exception as e:
        # Events are best effort; the service runs without them
        logger.error("Kafka producer unavailable, continuing without donation events", error=str(e))


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Giving Service")
    await kafka_producer.stop()
    await close_db()


app.include_router(health_router)
app.include_router(donations_router)
app.include_router(campaigns_router)
app.include_router(persons_router)


if __name__ == "__main__":
    uvicorn.run(
        "giving_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )
