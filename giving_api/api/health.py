"""
Liveness, readiness and Prometheus endpoints
"""
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
import structlog

from giving_api.core.circuit_breaker import CircuitState
from giving_api.core.config import get_settings
from giving_api.database.database import engine
from giving_api.kafka.producer import kafka_producer
from giving_api.middleware.metrics import metrics_endpoint
from giving_api.services.payment_provider import payment_circuit_breaker

router = APIRouter(tags=["health"])
logger = structlog.get_logger(__name__)


@router.get("/health")
async def health_check():
    """Process is up; dependencies are not checked"""
    return {
        "status": "healthy",
        "service": get_settings().service_name,
        "kafka_connected": kafka_producer.is_connected(),
        "timestamp": time.time()
    }


@router.get("/health/ready")
async def readiness_check():
    """
    Ready when the database answers. An open payment circuit is reported
    but does not make the service unready: reads and donation updates still work.
    """
    settings = get_settings()
    payment_state = payment_circuit_breaker.state
    body = {
        "service": settings.service_name,
        "payment_provider": payment_state.value,
        "kafka_connected": kafka_producer.is_connected(),
        "timestamp": time.time()
    }

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Readiness check failed", error=str(e))
        return JSONResponse(
            status_code=503,
            content={**body, "status": "not ready", "database": "disconnected", "error": str(e)}
        )

    if payment_state != CircuitState.CLOSED:
        logger.warning("Ready with payment provider circuit not closed", breaker=payment_circuit_breaker.get_state())

    return {**body, "status": "ready", "database": "connected"}


@router.get("/metrics")
async def metrics(request: Request):
    return await metrics_endpoint(request)
