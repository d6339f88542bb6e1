from __future__ import annotations
import asyncio
import logging
import re
from collections import deque, defaultdict
from datetime import datetime, timezone, timedelta
from typing import Callable, Any, Dict
from email.utils import parsedate_to_datetime

import httpx
from google.genai.errors import APIError, ClientError, ServerError

from interview_coach.core.config import settings

logger = logging.getLogger(__name__)


class ServiceRateLimiter:
    """
    Simple sliding-window limiter for requests per minute.
    """
    def __init__(self, rpm_limits: Dict[str, int] = None):
        # RPM tracking (sliding window - last 1 minute)
        self._services: Dict[str, deque] = defaultdict(deque)
        self._rpm_limits = rpm_limits or {
            'gemini': settings.GEMINI_RPM,
            'default': settings.GEMINI_RPM
        }
        self._lock = asyncio.Lock()

    async def acquire_slot(self, service: str):
        """Blocks until a slot is available for the given service."""
        while True:
            async with self._lock:
                wait_time = self._check_rpm_and_acquire(service, datetime.now(timezone.utc))
                if wait_time == 0:
                    return

            # Sleep outside the lock
            await asyncio.sleep(wait_time)

    def _check_rpm_and_acquire(self, service: str, now: datetime) -> float:
        """Check RPM limits and acquire slot if available."""
        history = self._services[service]
        limit = self._rpm_limits.get(service, self._rpm_limits['default'])

        # Remove requests older than 1 minute
        while history and history[0] < now - timedelta(minutes=1):
            history.popleft()

        # If full, wait for the oldest request to expire
        if len(history) >= limit:
            wait_time = (history[0] + timedelta(minutes=1) - now).total_seconds()
            if wait_time > 0:
                logger.info(f"RPM limit for {service}. Waiting {wait_time:.2f}s")
                return wait_time

        history.append(now)
        return 0.0


# Global Instance
rate_limiter = ServiceRateLimiter()


def is_retryable(error: Exception) -> bool:
    """Transient Gemini failures: server errors, 429 rate limiting, timeouts and connection drops."""
    if isinstance(error, ServerError):
        return True
    if isinstance(error, ClientError):
        return error.code == 429
    return isinstance(error, (httpx.TransportError, asyncio.TimeoutError))


def _quota_violations(error: Exception) -> list:
    details = getattr(error, "details", None)
    if not isinstance(details, dict):
        return []
    error_body = details.get("error", details)
    if not isinstance(error_body, dict):
        return []
    violations = []
    for detail in error_body.get("details") or []:
        if isinstance(detail, dict) and detail.get("@type", "").endswith("google.rpc.QuotaFailure"):
            violations.extend(detail.get("violations") or [])
    return violations


def is_hard_quota(error: Exception) -> bool:
    """
    A 429 that waiting will not fix: a per-day quota is exhausted.

    Per-minute quota violations and 429s without quota details stay retryable.
    """
    if not isinstance(error, ClientError) or error.code != 429:
        return False
    for violation in _quota_violations(error):
        if "PerDay" in str(violation.get("quotaId", "")):
            return True
    return "daily limit" in str(getattr(error, "message", "") or "").lower()


def parse_retry_after(exception: Exception) -> float:
    """
    Extracts wait time from API error responses.
    """
    try:
        # 1. Check Retry-After header
        response = getattr(exception, 'response', None)
        if response is not None:
            headers = getattr(response, 'headers', None) or {}
            val = headers.get('Retry-After') or headers.get('retry-after')
            if val:
                if val.isdigit():
                    return float(val)
                return (parsedate_to_datetime(val) - datetime.now(timezone.utc)).total_seconds()

        # 2. Parse Gemini error message
        error_str = str(exception)
        retry_match = re.search(r'retry in ([\d.]+)s', error_str, re.IGNORECASE)
        if retry_match:
            return float(retry_match.group(1))

        # 3. Parse retryDelay from JSON details
        delay_match = re.search(r"['\"]retryDelay['\"]:\s*['\"]([\d.]+)s['\"]", error_str)
        if delay_match:
            return float(delay_match.group(1))

    except (TypeError, ValueError) as e:
        logger.debug(f"Could not parse retry delay: {e}")
    return 0.0


async def safe_api_call(
    func: Callable[..., Any],
    *args,
    service: str = 'default',
    limiter: ServiceRateLimiter = None,
    **kwargs
) -> Any:
    """
    Unified API call wrapper with rate limiting and retry of transient errors.

    Non-retryable errors, hard quota errors and the last failed attempt are re-raised.
    """
    max_retries = max(1, settings.RETRY_MAX_ATTEMPTS)
    base_delay = settings.RETRY_BASE_DELAY
    max_delay = settings.RETRY_MAX_DELAY
    limiter = limiter or rate_limiter

    for attempt in range(max_retries):
        try:
            await limiter.acquire_slot(service)
            return await func(*args, **kwargs)

        except (APIError, httpx.TransportError, asyncio.TimeoutError) as e:
            if not is_retryable(e):
                logger.error(f"Non-retryable error for {service}: {e}")
                raise

            if is_hard_quota(e):
                logger.error(f"API quota exhausted for {service}: {str(e)[:200]}")
                raise

            if attempt == max_retries - 1:
                logger.error(f"Max retries reached for {service}")
                raise

            retry_delay = parse_retry_after(e)
            if retry_delay > 0:
                wait_time = min(retry_delay, max_delay)
                logger.warning(f"Rate limit for {service}. Retrying in {wait_time:.1f}s (attempt {attempt + 1}/{max_retries})")
            else:
                # Exponential backoff
                wait_time = min(base_delay * (2 ** attempt), max_delay)
                logger.warning(f"Retrying {service} in {wait_time:.1f}s (attempt {attempt + 1}/{max_retries})")

            await asyncio.sleep(wait_time)

    raise RuntimeError(f"Failed after {max_retries} attempts")
