from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import jwt

from duelytics.core.config import settings

ALGO = "HS256"


@dataclass(frozen=True)
class Identity:
    user_id: str
    username: str
    is_admin: bool = False
    is_supporter: bool = False


def now_utc() -> datetime:
    return datetime.now(timezone.utc)

def create_access_token(sub: str, username: str, is_admin: bool = False, is_supporter: bool = False) -> str:
    # Real users get their tokens from the identity provider; this is for dev/test clients.
    exp = now_utc() + timedelta(minutes=settings.JWT_ACCESS_MINUTES)
    payload = {
        "sub": sub,
        "type": "access",
        "username": username,
        "is_admin": is_admin,
        "is_supporter": is_supporter,
        "exp": exp,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGO)

def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGO])

def identity_from_claims(payload: dict) -> Identity:
    sub = payload.get("sub")
    if not sub:
        raise ValueError("token without subject")
    return Identity(
        user_id=str(sub),
        username=str(payload.get("username") or sub),
        is_admin=bool(payload.get("is_admin", False)),
        is_supporter=bool(payload.get("is_supporter", False)),
    )
