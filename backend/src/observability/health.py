"""Health check utilities for the document service.

Provides health and readiness checks for the database and the blob store.
"""

import logging
import time
from enum import Enum
from typing import Dict, Optional
from dataclasses import dataclass

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from domain.documents.errors import StorageError
from domain.documents.ports.blob_store_port import BlobStorePort

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    """Health check status enum."""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


@dataclass
class ComponentHealth:
    """Health status for a single component."""
    status: HealthStatus
    message: Optional[str] = None
    latency_ms: Optional[float] = None


def check_database_health(db: Session) -> ComponentHealth:
    """Check database connectivity and health.

    Args:
        db: Database session

    Returns:
        ComponentHealth: Database health status
    """
    try:
        start = time.time()
        db.execute(text("SELECT 1"))
        latency_ms = (time.time() - start) * 1000

        return ComponentHealth(
            status=HealthStatus.HEALTHY,
            message="Database connection OK",
            latency_ms=round(latency_ms, 2)
        )
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            message="Database unavailable"
        )


async def check_blob_store_health(store: BlobStorePort) -> ComponentHealth:
    """Check the document blob store is reachable and writable.

    Returns:
        ComponentHealth: Blob store health status
    """
    try:
        start = time.time()
        healthy = await store.check_health()
        latency_ms = (time.time() - start) * 1000
    except StorageError as e:
        logger.error(f"Blob store health check failed: {e}", exc_info=True)
        healthy, latency_ms = False, None

    if healthy:
        return ComponentHealth(
            status=HealthStatus.HEALTHY,
            message="Blob store OK",
            latency_ms=round(latency_ms, 2)
        )
    return ComponentHealth(status=HealthStatus.UNHEALTHY, message="Blob store unavailable")


def get_overall_health(components: Dict[str, ComponentHealth]) -> HealthStatus:
    """Determine overall health from component statuses.

    Args:
        components: Dictionary of component health statuses

    Returns:
        HealthStatus: Overall system health
    """
    if all(c.status == HealthStatus.HEALTHY for c in components.values()):
        return HealthStatus.HEALTHY

    if any(c.status == HealthStatus.UNHEALTHY for c in components.values()):
        return HealthStatus.UNHEALTHY

    return HealthStatus.DEGRADED
