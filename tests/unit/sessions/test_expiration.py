"""Tests for expiration and touch-throttling math."""

import math
from datetime import UTC, datetime

from dynamo_sessions.sessions.expiration import (
    compute_expires_at,
    effective_touch_after,
    elapsed_since_refresh,
    is_expired,
    lifetime_seconds,
    nominal_lifetime_seconds,
    should_touch,
)
from dynamo_sessions.sessions.models import SessionCookie
from tests.factories.sessions import HOUR_MS, NOW, SessionFactory

DAY = 86400


class TestLifetime:
    """Tests for lifetime selection."""

    def test_max_age_in_milliseconds(self) -> None:
        cookie = SessionCookie(max_age=HOUR_MS)
        assert lifetime_seconds(cookie, DAY) == 3600

    def test_falls_back_to_default_ttl(self) -> None:
        assert lifetime_seconds(SessionCookie(), DAY) == DAY

    def test_nominal_prefers_original_max_age(self) -> None:
        cookie = SessionCookie(original_max_age=2 * HOUR_MS, max_age=HOUR_MS)
        assert nominal_lifetime_seconds(cookie, DAY) == 7200

    def test_nominal_falls_back_to_max_age_then_default(self) -> None:
        assert nominal_lifetime_seconds(SessionCookie(max_age=HOUR_MS), DAY) == 3600
        assert nominal_lifetime_seconds(SessionCookie(), DAY) == DAY


class TestComputeExpiresAt:
    """Tests for the stored expiry."""

    def test_now_plus_max_age(self) -> None:
        cookie = SessionCookie(max_age=HOUR_MS)
        assert compute_expires_at(cookie, DAY, NOW) == int(NOW) + 3600

    def test_default_ttl_without_max_age(self) -> None:
        assert compute_expires_at(SessionCookie(), DAY, NOW) == int(NOW) + DAY

    def test_returns_whole_seconds(self) -> None:
        cookie = SessionCookie(max_age=1500)
        result = compute_expires_at(cookie, DAY, NOW + 0.25)
        assert isinstance(result, int)
        assert result == int(NOW) + 1


class TestEffectiveTouchAfter:
    """Tests for the throttle window."""

    def test_configured_window_when_smaller(self) -> None:
        assert effective_touch_after(60, 3600) == 60

    def test_capped_at_tenth_of_lifetime(self) -> None:
        """A 30 minute session with touch_after=3600 refreshes after 3 minutes."""
        assert effective_touch_after(3600, 1800) == 180

    def test_zero_window(self) -> None:
        assert effective_touch_after(0, 3600) == 0


class TestShouldTouch:
    """Tests for the throttle decision."""

    def test_no_write_just_after_refresh(self) -> None:
        session = SessionFactory.create(refreshed_seconds_ago=10)
        assert should_touch(session.cookie, 3600, DAY, NOW) is False

    def test_write_once_window_has_passed(self) -> None:
        """One hour session: window is 360 seconds."""
        session = SessionFactory.create(refreshed_seconds_ago=361)
        assert should_touch(session.cookie, 3600, DAY, NOW) is True

    def test_window_boundary_is_exclusive(self) -> None:
        session = SessionFactory.create(refreshed_seconds_ago=360)
        assert should_touch(session.cookie, 3600, DAY, NOW) is False

    def test_short_touch_after_wins(self) -> None:
        session = SessionFactory.create(refreshed_seconds_ago=61)
        assert should_touch(session.cookie, 60, DAY, NOW) is True

    def test_zero_touch_after_always_writes(self) -> None:
        session = SessionFactory.create(refreshed_seconds_ago=1)
        assert should_touch(session.cookie, 0, DAY, NOW) is True

    def test_missing_expires_always_writes(self) -> None:
        session = SessionFactory.create(refreshed_seconds_ago=None)
        assert elapsed_since_refresh(session.cookie, DAY, NOW) == math.inf
        assert should_touch(session.cookie, 3600, DAY, NOW) is True

    def test_naive_expires_treated_as_utc(self) -> None:
        expires = datetime.fromtimestamp(NOW + 3600 - 10, UTC).replace(tzinfo=None)
        cookie = SessionCookie(original_max_age=HOUR_MS, max_age=HOUR_MS, expires=expires)
        assert elapsed_since_refresh(cookie, DAY, NOW) == 10


class TestIsExpired:
    """Tests for stored-expiry checks."""

    def test_past_expiry(self) -> None:
        assert is_expired(NOW - 1, NOW) is True

    def test_future_expiry(self) -> None:
        assert is_expired(NOW + 1, NOW) is False

    def test_missing_or_zero_means_no_expiry(self) -> None:
        assert is_expired(None, NOW) is False
        assert is_expired(0, NOW) is False

    def test_non_numeric_ignored(self) -> None:
        assert is_expired("1", NOW) is False
        assert is_expired(True, NOW) is False
