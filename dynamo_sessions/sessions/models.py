"""Session data models.

The stored payload keeps the layout session middleware produces: a flat
mapping with a `cookie` entry next to the application's own fields.

    {
        "cookie": {"originalMaxAge": 3600000, "maxAge": 3599000,
                   "expires": "2024-05-01T12:00:00+00:00", "httpOnly": true},
        "user": "alice",
        "cart": [...]
    }

Only the cookie entry drives expiration math:
- originalMaxAge: nominal session lifetime (ms)
- maxAge: remaining relative lifetime (ms); sets the stored expiry
- expires: absolute expiry the middleware last computed
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

COOKIE_FIELD = "cookie"


class SessionCookie(BaseModel):
    """Cookie sub-structure of a session.

    Accepts both the camelCase names used on the wire and snake_case names.
    Attributes outside this schema are dropped.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    original_max_age: int | None = Field(
        default=None,
        description="Nominal session lifetime in milliseconds",
    )
    max_age: int | None = Field(
        default=None,
        description="Remaining lifetime in milliseconds",
    )
    expires: datetime | None = Field(
        default=None,
        description="Absolute expiration time",
    )
    http_only: bool | None = None
    secure: bool | str | None = None
    path: str | None = None
    domain: str | None = None
    same_site: bool | str | None = None


class SessionData(BaseModel):
    """A session as exchanged with the middleware."""

    cookie: SessionCookie = Field(
        default_factory=SessionCookie,
        description="Cookie settings carrying the expiration hints",
    )
    values: dict[str, Any] = Field(
        default_factory=dict,
        description="Application fields stored in the session",
    )

    @field_validator("values")
    @classmethod
    def _no_cookie_key(cls, v: dict[str, Any]) -> dict[str, Any]:
        if COOKIE_FIELD in v:
            raise ValueError("'cookie' is reserved for the session cookie")
        return v

    def to_payload(self) -> dict[str, Any]:
        """Flatten into the stored mapping (camelCase cookie, unset attributes omitted)."""
        return {
            COOKIE_FIELD: self.cookie.model_dump(by_alias=True, exclude_none=True),
            **self.values,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SessionData":
        """Build from a stored mapping; every key but `cookie` is a value."""
        return cls(
            cookie=payload.get(COOKIE_FIELD) or {},
            values={k: v for k, v in payload.items() if k != COOKIE_FIELD},
        )
