from __future__ import annotations

from collections import defaultdict
from contextlib import contextmanager
import logging
import threading
import time
from typing import DefaultDict, Iterator, Optional

from redis import Redis
import ulid

from ..monitoring.prometheus_metrics import prometheus_metrics
from .config import settings
from .exceptions import SlotUnavailableException

logger = logging.getLogger(__name__)

_SYNC_REDIS: Optional[Redis] = None
_SYNC_REDIS_LOCK = threading.Lock()

_LOCAL_LOCKS: DefaultDict[str, threading.Lock] = defaultdict(threading.Lock)
_LOCAL_LOCKS_GUARD = threading.Lock()

_POLL_INTERVAL_S = 0.05


def _lock_key(tutor_id: str) -> str:
    return f"tutorlink:lock:tutor:{tutor_id}:booking"


def _get_sync_redis() -> Optional[Redis]:
    global _SYNC_REDIS
    if not settings.redis_url:
        return None
    if _SYNC_REDIS is not None:
        return _SYNC_REDIS
    with _SYNC_REDIS_LOCK:
        if _SYNC_REDIS is not None:
            return _SYNC_REDIS
        try:
            client = Redis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            client.ping()
        except Exception as exc:
            logger.warning("booking_lock_redis_unavailable: %s", exc)
            return None
        _SYNC_REDIS = client
        return _SYNC_REDIS


def _local_lock(tutor_id: str) -> threading.Lock:
    with _LOCAL_LOCKS_GUARD:
        return _LOCAL_LOCKS[tutor_id]


def _acquire_redis(client: Redis, tutor_id: str, token: str, ttl_s: int, wait_s: float) -> bool:
    deadline = time.monotonic() + wait_s
    key = _lock_key(tutor_id)
    while True:
        if client.set(key, token, nx=True, ex=ttl_s):
            return True
        if time.monotonic() >= deadline:
            return False
        time.sleep(_POLL_INTERVAL_S)


def _release_redis(client: Redis, tutor_id: str, token: str) -> None:
    key = _lock_key(tutor_id)
    try:
        # Only delete our own token; an expired lock may already belong to another request
        if client.get(key) == token:
            client.delete(key)
            prometheus_metrics.record_booking_lock("release", "success")
        else:
            prometheus_metrics.record_booking_lock("release", "expired")
    except Exception as exc:
        prometheus_metrics.record_booking_lock("release", "error")
        logger.warning(
            "booking_lock_release_failed",
            extra={"tutor_id": tutor_id, "error": str(exc), "error_type": type(exc).__name__},
        )


@contextmanager
def tutor_booking_lock(
    tutor_id: str,
    ttl_s: Optional[int] = None,
    wait_s: Optional[float] = None,
) -> Iterator[None]:
    """
    Serialize booking validation and insert for a single tutor.

    Uses redis ``SET NX EX`` when ``settings.redis_url`` is configured so the
    lock holds across workers; otherwise falls back to a process-local lock.

    Raises:
        SlotUnavailableException: If the lock cannot be acquired within ``wait_s``
    """
    ttl = ttl_s if ttl_s is not None else settings.booking_lock_ttl_seconds
    wait = wait_s if wait_s is not None else settings.booking_lock_wait_seconds

    client = _get_sync_redis()
    if client is not None:
        token = str(ulid.ULID())
        try:
            acquired = _acquire_redis(client, tutor_id, token, ttl, wait)
        except Exception as exc:
            prometheus_metrics.record_booking_lock("acquire", "error")
            logger.warning(
                "booking_lock_acquire_failed",
                extra={"tutor_id": tutor_id, "error": str(exc), "error_type": type(exc).__name__},
            )
        else:
            if not acquired:
                prometheus_metrics.record_booking_lock("acquire", "timeout")
                raise SlotUnavailableException(
                    "Another booking for this tutor is in progress, please retry",
                    details={"tutor_id": tutor_id},
                )
            prometheus_metrics.record_booking_lock("acquire", "success")
            try:
                yield
            finally:
                _release_redis(client, tutor_id, token)
            return

    lock = _local_lock(tutor_id)
    if not lock.acquire(timeout=wait):
        prometheus_metrics.record_booking_lock("acquire", "timeout")
        raise SlotUnavailableException(
            "Another booking for this tutor is in progress, please retry",
            details={"tutor_id": tutor_id},
        )
    prometheus_metrics.record_booking_lock("acquire", "local")
    try:
        yield
    finally:
        lock.release()
