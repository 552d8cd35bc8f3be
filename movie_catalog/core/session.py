# movie_catalog/core/session.py
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from movie_catalog.core.config import settings

# cookie names the browser client reads and sends back
NAME_COOKIE = "username"
TOKEN_COOKIE = "id"

@dataclass(frozen=True)
class SessionToken:
    value: str
    # applies to the delivery cookie only; the server never expires a token
    expires_at: datetime

@dataclass(frozen=True)
class SessionFilter:
    name: str
    token: str

def cookie_expiry(now: datetime = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now + timedelta(weeks=settings.SESSION_COOKIE_WEEKS)

def issue_session(now: datetime = None) -> SessionToken:
    """
    Fresh random bearer token for a newly registered user.
    """
    return SessionToken(value=str(uuid4()), expires_at=cookie_expiry(now))

def renew_cookie(token: str, now: datetime = None) -> SessionToken:
    # login hands back the stored token unchanged, only the cookie is re-dated
    return SessionToken(value=token, expires_at=cookie_expiry(now))

def session_filter(name: str, token: str) -> SessionFilter:
    return SessionFilter(name=name, token=token)
