"""Retry utilities for async I/O operations.

This module provides retry decorators using tenacity. The navigation core
never retries on its own; retries are reserved for transient storage and
transport failures outside it.
"""

from __future__ import annotations

import asyncio
import logging

from aiohttp import ClientConnectorError, ServerDisconnectedError
from pymongo.errors import AutoReconnect, NetworkTimeout
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

TRANSIENT_STORAGE_ERRORS: tuple[type[BaseException], ...] = (
    AutoReconnect,
    NetworkTimeout,
)


def retry_async(
    max_retries: int = 3,
    retry_delay: float = 1.0,
    backoff_factor: float = 2.0,
    retry_exceptions: tuple = (
        ClientConnectorError,
        ServerDisconnectedError,
        asyncio.TimeoutError,
    ),
):
    """Factory that returns a tenacity retry decorator configured with provided parameters.

    Args:
        max_retries: Maximum number of retry attempts (in addition to the first attempt).
        retry_delay: Initial delay between retries in seconds (used as multiplier).
        backoff_factor: Exponential backoff base for increasing delay between retries.
        retry_exceptions: Tuple of exception types that should trigger a retry.

    Returns:
        A tenacity retry decorator configured with the specified parameters.

    Example:
        @retry_async(max_retries=2, retry_exceptions=TRANSIENT_STORAGE_ERRORS)
        async def save(doc):
            await doc.save()
    """
    return retry(
        # stop_after_attempt includes the first attempt
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=retry_delay, exp_base=backoff_factor),
        retry=retry_if_exception_type(retry_exceptions),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
