"""Utilities for ensuring idempotent Celery task execution using Redis.

Usage:
    from app.tasks.utils.idempotency import Idempotency
    with Idempotency(redis_client).guard(key, ttl_seconds=86400):
        # run task code

If the key is already present, the guard raises DuplicateTaskInvocation to skip
duplicate work. The key is kept after a successful run so later duplicates are
suppressed until it expires; it is released when the guarded block fails so a
retry can run.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator
import logging

import redis

logger = logging.getLogger(__name__)


class DuplicateTaskInvocation(RuntimeError):
    """Idempotency key already exists."""


class Idempotency:
    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client

    @contextmanager
    def guard(self, key: str, ttl_seconds: int = 300) -> Iterator[None]:
        acquired = self.redis.set(name=key, value="1", nx=True, ex=ttl_seconds)
        if not acquired:
            raise DuplicateTaskInvocation(f"Duplicate task invocation (idempotency key {key} exists)")
        try:
            yield None
        except BaseException:
            try:
                self.redis.delete(key)
            except redis.RedisError as e:
                logger.warning(f"Could not release idempotency key {key}: {e}")
            raise
