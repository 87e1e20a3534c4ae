"""Expiration math for session records.

All times are epoch seconds. Cookie durations (maxAge, originalMaxAge) are
milliseconds, as session middleware reports them.

Touch throttling: a TTL refresh is a write, and DynamoDB writes cost several
times more than reads, so `touch` only writes once enough of the session's
lifetime has gone by since the expiry was last set:

    elapsed = now + nominal_lifetime - cookie.expires
    window  = min(touch_after, 10% of nominal_lifetime)
    write only when elapsed > window

The decision uses the expiry the caller read, which may be stale under
concurrent requests for the same session. The window is best-effort, not a
hard cap on write frequency.
"""

import math
from datetime import UTC, datetime

from dynamo_sessions.sessions.models import SessionCookie

# Attribute the table's native TTL reaper watches
EXPIRES_ATTRIBUTE = "expires"

# Upper bound on the throttle window, as a fraction of the session lifetime
TOUCH_AFTER_LIFETIME_FRACTION = 0.1


def _to_epoch(value: datetime) -> float:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.timestamp()


def lifetime_seconds(cookie: SessionCookie, default_ttl: int) -> float:
    """Lifetime applied on write: cookie maxAge, else the configured fallback."""
    if cookie.max_age is not None:
        return cookie.max_age / 1000
    return float(default_ttl)


def compute_expires_at(cookie: SessionCookie, default_ttl: int, now: float) -> int:
    """Epoch-seconds expiry for a record written at `now`."""
    return int(now + lifetime_seconds(cookie, default_ttl))


def nominal_lifetime_seconds(cookie: SessionCookie, default_ttl: int) -> float:
    """Full lifetime of the session: originalMaxAge, else maxAge, else fallback."""
    if cookie.original_max_age is not None:
        return cookie.original_max_age / 1000
    return lifetime_seconds(cookie, default_ttl)


def effective_touch_after(touch_after: float, nominal_lifetime: float) -> float:
    """Throttle window, never longer than 10% of the session lifetime.

    >>> effective_touch_after(3600, 1800)
    180.0
    """
    return min(float(touch_after), nominal_lifetime * TOUCH_AFTER_LIFETIME_FRACTION)


def elapsed_since_refresh(cookie: SessionCookie, default_ttl: int, now: float) -> float:
    """Seconds since the expiry was last pushed out; infinite without `expires`."""
    if cookie.expires is None:
        return math.inf
    return now + nominal_lifetime_seconds(cookie, default_ttl) - _to_epoch(cookie.expires)


def should_touch(
    cookie: SessionCookie,
    touch_after: float,
    default_ttl: int,
    now: float,
) -> bool:
    """Whether a touch at `now` is worth a write."""
    window = effective_touch_after(
        touch_after, nominal_lifetime_seconds(cookie, default_ttl)
    )
    return elapsed_since_refresh(cookie, default_ttl, now) > window


def is_expired(expires_at: object, now: float) -> bool:
    """Whether a stored expiry has passed.

    Missing, zero or non-numeric values mean the record carries no expiry.
    """
    if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
        return False
    if expires_at <= 0:
        return False
    return expires_at < now
