import logging
import time

logger = logging.getLogger(__name__)

# ── CONFIG ──────────────────────────────────────────
MINUTE_SECONDS = 60   # length of the opening burst window
MINUTE_LIMIT = 15     # max requests inside the opening minute
HOUR_LIMIT = 60       # max requests per session hour


class RateLimiter:
    """
    15 requests in the first minute of a session, 60 per hour after that.

    The minute threshold is measured from the session's first request,
    not as a trailing window. Denied requests are still counted.
    """

    def __init__(self, store, clock=time.time):
        self.store = store
        self.clock = clock

    def _now(self) -> int:
        return int(self.clock())

    def check_and_record(self, user_id: int) -> bool:
        """
        Returns True if user is allowed.
        Returns False if rate-limited.
        Storage trouble never blocks a user.
        """
        try:
            now = self._now()
            self.store.purge(now)
            entry = self.store.increment(user_id, now)

            elapsed = now - entry.first_request
            limit = MINUTE_LIMIT if elapsed <= MINUTE_SECONDS else HOUR_LIMIT
            return entry.count <= limit
        except Exception as e:
            logger.error(f"Rate limit error (allowing): {e}", exc_info=True)
            return True

    def usage_info(self, user_id: int) -> dict:
        try:
            entry = self.store.get(user_id)
        except Exception as e:
            logger.warning(f"Rate limit lookup failed: {e}")
            entry = None

        used = entry.count if entry and not entry.expired(self._now()) else 0
        return {"used": used, "remaining": max(0, HOUR_LIMIT - used)}

    def reset(self, user_id: int):
        self.store.reset(user_id)
