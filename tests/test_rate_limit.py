import json
import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from utils.rate_limit import HOUR_LIMIT, MINUTE_LIMIT, RateLimiter
from utils.state import JsonFileStore


class TestThresholds:
    def test_first_fifteen_allowed_sixteenth_denied(self, limiter):
        results = [limiter.check_and_record(1) for _ in range(16)]
        assert results[:MINUTE_LIMIT] == [True] * MINUTE_LIMIT
        assert results[15] is False

    def test_hour_limit_applies_after_first_minute(self, limiter, clock):
        for _ in range(16):
            limiter.check_and_record(1)

        clock.advance(61)
        # denied requests still counted: 16 so far
        later = [limiter.check_and_record(1) for _ in range(HOUR_LIMIT - 16)]
        assert all(later)
        assert limiter.usage_info(1)["used"] == HOUR_LIMIT

        assert limiter.check_and_record(1) is False

    def test_sixtieth_allowed_sixty_first_denied(self, limiter, clock):
        limiter.check_and_record(1)
        clock.advance(61)

        results = [limiter.check_and_record(1) for _ in range(HOUR_LIMIT)]
        assert results[HOUR_LIMIT - 2] is True   # 60th overall
        assert results[HOUR_LIMIT - 1] is False  # 61st overall

    def test_minute_boundary_is_inclusive(self, limiter, clock):
        for _ in range(MINUTE_LIMIT):
            limiter.check_and_record(1)

        clock.advance(60)
        assert limiter.check_and_record(1) is False

        clock.advance(1)
        assert limiter.check_and_record(1) is True

    def test_users_are_independent(self, limiter):
        for _ in range(16):
            limiter.check_and_record(1)
        assert limiter.check_and_record(2) is True


class TestExpiry:
    def test_entry_idle_for_3601_seconds_is_purged(self, limiter, store, clock):
        for _ in range(20):
            limiter.check_and_record(1)

        clock.advance(3601)
        assert limiter.check_and_record(1) is True

        entry = store.get(1)
        assert entry.count == 1
        assert entry.first_request == clock.now

    def test_entry_idle_for_exactly_3600_seconds_is_kept(self, limiter, store, clock):
        limiter.check_and_record(1)
        clock.advance(3600)
        limiter.check_and_record(1)
        assert store.get(1).count == 2

    def test_purge_removes_other_stale_users(self, limiter, store, clock):
        limiter.check_and_record(1)
        clock.advance(3601)
        limiter.check_and_record(2)

        data = json.loads(store.path.read_text())
        assert list(data) == ["2"]


class TestFailOpen:
    def test_store_error_allows_request(self, clock, caplog):
        class BrokenStore:
            def purge(self, now):
                raise OSError("disk on fire")

        limiter = RateLimiter(BrokenStore(), clock=clock)
        with caplog.at_level(logging.ERROR):
            assert limiter.check_and_record(1) is True
        assert "disk on fire" in caplog.text

    def test_corrupt_file_reads_as_empty(self, limiter, store):
        store.path.write_text("{not json")
        assert limiter.check_and_record(1) is True
        assert store.get(1).count == 1

    @pytest.mark.parametrize("bad", [
        {"999": 5},
        {"999": None},
        {"999": {"count": 1, "first_request": 0, "last_request": "x"}},
        {"999": {"count": 1}},
    ])
    def test_bad_entry_does_not_disable_limiting(self, limiter, store, bad):
        store.path.write_text(json.dumps(bad))

        results = [limiter.check_and_record(1) for _ in range(16)]

        assert results[15] is False
        assert list(json.loads(store.path.read_text())) == ["1"]

    def test_write_failure_is_logged_and_ignored(self, tmp_path, clock, caplog):
        store = JsonFileStore(tmp_path / "missing" / "rate_limits.json")
        limiter = RateLimiter(store, clock=clock)

        with caplog.at_level(logging.ERROR):
            assert limiter.check_and_record(1) is True
        assert "Error writing rate limit file" in caplog.text


class TestUsageInfo:
    def test_no_entry(self, limiter):
        assert limiter.usage_info(1) == {"used": 0, "remaining": 60}

    def test_counts_requests(self, limiter):
        for _ in range(3):
            limiter.check_and_record(1)
        assert limiter.usage_info(1) == {"used": 3, "remaining": 57}

    def test_idempotent(self, limiter):
        limiter.check_and_record(1)
        first = limiter.usage_info(1)
        second = limiter.usage_info(1)
        assert first == second

    def test_remaining_never_negative(self, limiter, clock):
        limiter.check_and_record(1)
        clock.advance(61)
        for _ in range(70):
            limiter.check_and_record(1)
        assert limiter.usage_info(1) == {"used": 71, "remaining": 0}

    def test_expired_entry_reports_zero(self, limiter, clock):
        limiter.check_and_record(1)
        clock.advance(3601)
        assert limiter.usage_info(1) == {"used": 0, "remaining": 60}

    def test_does_not_write(self, limiter, store):
        limiter.usage_info(1)
        assert not store.path.exists()


class TestConcurrency:
    def test_simultaneous_requests_from_new_user_are_all_counted(self, limiter, store):
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda _: limiter.check_and_record(7), range(40)))

        assert store.get(7).count == 40


def test_reset_clears_user(limiter):
    for _ in range(16):
        limiter.check_and_record(1)
    limiter.reset(1)
    assert limiter.check_and_record(1) is True
