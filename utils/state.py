import json
import logging
import os
import secrets
import threading
import time
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 3600  # entries idle longer than this are dropped


@dataclass
class RateLimitEntry:
    count: int
    first_request: int
    last_request: int

    def expired(self, now: int) -> bool:
        return now - self.last_request > WINDOW_SECONDS

    @classmethod
    def from_dict(cls, data: dict) -> "RateLimitEntry":
        return cls(
            count=int(data["count"]),
            first_request=int(data["first_request"]),
            last_request=int(data["last_request"]),
        )


# ── JSON file store (default) ─────────────────
class JsonFileStore:
    """
    Rate-limit map kept in a single JSON file:
    {"<user_id>": {"count": .., "first_request": .., "last_request": ..}}

    A missing or broken file reads as an empty map. Write failures are
    logged and ignored.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError):
            return {}
        if not isinstance(data, dict):
            return {}

        entries = {}
        for uid, raw in data.items():
            try:
                entries[uid] = asdict(RateLimitEntry.from_dict(raw))
            except (AttributeError, KeyError, TypeError, ValueError):
                logger.warning(f"Dropping bad rate limit entry for {uid}: {raw!r}")
        return entries

    def _save(self, data: dict):
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            logger.error(f"Error writing rate limit file (ignoring): {e}")

    def get(self, user_id: int) -> RateLimitEntry | None:
        with self._lock:
            raw = self._load().get(str(user_id))
        return RateLimitEntry.from_dict(raw) if raw else None

    def increment(self, user_id: int, now: int) -> RateLimitEntry:
        with self._lock:
            data = self._load()
            raw = data.get(str(user_id))
            if raw:
                entry = RateLimitEntry.from_dict(raw)
                entry.count += 1
                entry.last_request = now
            else:
                entry = RateLimitEntry(count=1, first_request=now, last_request=now)
            data[str(user_id)] = asdict(entry)
            self._save(data)
        return entry

    def purge(self, now: int) -> int:
        with self._lock:
            data = self._load()
            stale = [
                uid for uid, raw in data.items()
                if now - raw["last_request"] > WINDOW_SECONDS
            ]
            for uid in stale:
                del data[uid]
            if stale:
                self._save(data)
        return len(stale)

    def reset(self, user_id: int):
        with self._lock:
            data = self._load()
            if data.pop(str(user_id), None) is not None:
                self._save(data)


# ── Redis store ───────────────────────────────
class RedisStore:
    """One hash per user; the key TTL does the purging."""

    def __init__(self, client):
        self.r = client

    @staticmethod
    def _key(user_id: int) -> str:
        return f"rate:{user_id}"

    def get(self, user_id: int) -> RateLimitEntry | None:
        raw = self.r.hgetall(self._key(user_id))
        return RateLimitEntry.from_dict(raw) if raw else None

    def increment(self, user_id: int, now: int) -> RateLimitEntry:
        key = self._key(user_id)
        pipe = self.r.pipeline()  # MULTI/EXEC
        pipe.hincrby(key, "count", 1)
        pipe.hsetnx(key, "first_request", now)
        pipe.hset(key, "last_request", now)
        pipe.expire(key, WINDOW_SECONDS)
        pipe.hgetall(key)
        *_, raw = pipe.execute()
        return RateLimitEntry.from_dict(raw)

    def purge(self, now: int) -> int:
        return 0

    def reset(self, user_id: int):
        self.r.delete(self._key(user_id))


# ── Long link memory ──────────────────────────
class LinkRegistry:
    """Short tokens for URLs too long to fit in callback data."""

    def __init__(self, client=None, ttl: int = 3600):
        self.r = client
        self.ttl = ttl
        self._links: dict[str, tuple[str, float]] = {}

    def register(self, url: str) -> str:
        token = secrets.token_hex(6)
        if self.r is not None:
            self.r.setex(f"link:{token}", self.ttl, url)
        else:
            self._links[token] = (url, time.time() + self.ttl)
            self._sweep()
        return token

    def lookup(self, token: str) -> str | None:
        if self.r is not None:
            return self.r.get(f"link:{token}")
        url, deadline = self._links.get(token, (None, 0.0))
        if url is None or deadline < time.time():
            self._links.pop(token, None)
            return None
        return url

    def _sweep(self):
        now = time.time()
        for token in [k for k, (_, deadline) in self._links.items() if deadline < now]:
            del self._links[token]


# ── Menu states ───────────────────────────────
class ConversationState(str, Enum):
    IDLE = "idle"
    AWAITING_CHOICE = "awaiting_choice"
    DELIVERING = "delivering"


class MenuTracker:
    """
    Per-menu conversation state keyed by (chat_id, message_id). Menus that
    are not tracked (finished, or offered before a restart) count as idle and
    accept a press.
    """

    MAX_MENUS = 10_000

    def __init__(self):
        self._menus: dict[tuple[int, int], ConversationState] = {}

    def state(self, chat_id: int, message_id: int) -> ConversationState:
        return self._menus.get((chat_id, message_id), ConversationState.IDLE)

    def offer(self, chat_id: int, message_id: int):
        self._menus[(chat_id, message_id)] = ConversationState.AWAITING_CHOICE
        while len(self._menus) > self.MAX_MENUS:
            del self._menus[next(iter(self._menus))]

    def begin(self, chat_id: int, message_id: int) -> bool:
        key = (chat_id, message_id)
        if self.state(*key) is ConversationState.DELIVERING:
            return False
        self._menus[key] = ConversationState.DELIVERING
        return True

    def finish(self, chat_id: int, message_id: int):
        self._menus.pop((chat_id, message_id), None)

    def __len__(self):
        return len(self._menus)
