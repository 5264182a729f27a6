from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
import sqlalchemy as sa

from duelytics.core.errors import NotFoundError, StateError
from duelytics.core.security import Identity, decode_token, identity_from_claims

bearer = HTTPBearer()


def get_identity(creds: HTTPAuthorizationCredentials = Depends(bearer)) -> Identity:
    try:
        payload = decode_token(creds.credentials)
        identity = identity_from_claims(payload)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    if payload.get("type") != "access":
        raise HTTPException(status_code=401, detail="Invalid token type")
    return identity


def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    if not identity.is_admin:
        raise StateError("Admin privileges required", status_code=403)
    return identity


def assert_session_admin(db: Session, session_id: int, identity: Identity):
    """Session admin or system admin. Returns the session row."""
    row = db.execute(sa.text("""
        SELECT id, name, status, admin_user_id
        FROM sessions
        WHERE id=:s
    """), {"s": session_id}).mappings().first()
    if not row:
        raise NotFoundError("Session not found")
    if row["admin_user_id"] != identity.user_id and not identity.is_admin:
        raise StateError("Session admin or system admin privileges required", status_code=403)
    return row
