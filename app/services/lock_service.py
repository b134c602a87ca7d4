import uuid
from contextlib import contextmanager

import redis

from app.domain.errors import ConflictError
from app.utils.retry import redis_retry
from app.utils.settings import REDIS_URL, CHECKOUT_LOCK_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)

# compare-and-delete in one script; redis runs Lua atomically so no
# other client can slip in between GET and DEL
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    Short-lived lock per payment confirmation id.

    Serializes concurrent verifications of the same payment so that the
    idempotency lookup and the order insert are not interleaved.
    """

    def __init__(self, url: str | None = None, ttl: int = CHECKOUT_LOCK_TTL_SECONDS):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl

    @staticmethod
    def _key(confirmation_id: str) -> str:
        return f"checkout:{confirmation_id}:lock"

    @redis_retry()
    def acquire_checkout_lock(self, confirmation_id: str, token: str, ttl: int) -> bool:
        key = self._key(confirmation_id)
        logger.info(f"Acquire lock {key}")
        # SET key token NX EX ttl, expires on its own if the holder dies
        return bool(self.redis.set(name=key, value=token, nx=True, ex=ttl))

    @redis_retry()
    def release_checkout_lock(self, confirmation_id: str, token: str) -> bool:
        key = self._key(confirmation_id)
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    @contextmanager
    def checkout_lock(self, confirmation_id: str):
        token = uuid.uuid4().hex
        if not self.acquire_checkout_lock(confirmation_id, token, self.ttl):
            raise ConflictError("Payment is already being processed")
        try:
            yield
        finally:
            try:
                self.release_checkout_lock(confirmation_id, token)
            except redis.RedisError as e:
                # the key still expires after ttl
                logger.warning(f"Failed to release lock for confirmation {confirmation_id}: {e}")
