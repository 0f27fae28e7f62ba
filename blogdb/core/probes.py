"""
Health probe functions for store connectivity.

Each probe function:
- Returns bool (True = healthy, False = unhealthy)
- Converts every failure into False instead of raising
- Bounds its wait with an explicit timeout
"""

import asyncio
import time
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from blogdb.core.config import get_settings
from blogdb.core.logging_config import get_logger, log_with_context


logger = get_logger(__name__)


async def check_database(
    database: AsyncIOMotorDatabase,
    timeout_seconds: Optional[float] = None,
) -> bool:
    """
    Check MongoDB connectivity.

    Lists collection names on the database, a lightweight metadata
    operation that requires server selection and, where enabled,
    authentication.

    Args:
        database: Database handle to probe
        timeout_seconds: Maximum time to wait
            (default: settings.check_connection_timeout_seconds)

    Returns:
        True if the server answered, False otherwise

    Example:
        >>> is_healthy = await check_database(client["blog"], timeout_seconds=2.0)
        >>> if not is_healthy:
        ...     print("MongoDB unavailable")

    Note:
        Without an explicit timeout the driver's server selection timeout
        still applies, whichever fires first wins.
    """
    if timeout_seconds is None:
        timeout_seconds = get_settings().check_connection_timeout_seconds

    start = time.perf_counter()
    try:
        async with asyncio.timeout(timeout_seconds):
            await database.list_collection_names()
            return True

    except asyncio.TimeoutError:
        log_with_context(
            logger,
            "warning",
            "Connectivity check timed out",
            database=database.name,
            operation="check_connection",
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return False
    except Exception as e:
        # Connection refused, auth failure, server selection timeout, etc.
        log_with_context(
            logger,
            "warning",
            f"Connectivity check failed: {e}",
            database=database.name,
            operation="check_connection",
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return False
