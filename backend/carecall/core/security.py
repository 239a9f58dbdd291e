"""
Authentication and request-level authorization.

Passwords are hashed with bcrypt. Sessions are signed JWTs carrying the
user's role and linked patient, so the principal attached to a request
never changes for the life of a token. A token is only honoured while its
session id matches the one stored on the user row; logout clears it.
"""
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from .config import settings
from .permissions import (
    Decision,
    Principal,
    authorize,
    authorize_collection,
    principal_for,
)
from ..models.call import Call
from ..models.user import User
from ..services.repository import MonitoringRepository, get_repository

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


# ── Passwords ────────────────────────────────────────────────────────────────

def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash
        return False


# ── Tokens ───────────────────────────────────────────────────────────────────

def new_session_id() -> str:
    return secrets.token_hex(16)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_refresh_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    to_encode.update({"exp": expire, "type": "refresh", "jti": secrets.token_hex(8)})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Return the token's claims, or None if it is invalid or expired."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


def session_claims(user: User) -> dict:
    """Claims identifying the user and their principal for a new session."""
    return {
        "sub": str(user.id),
        "role": user.role,
        "related_patient_id": user.related_patient_id,
        "sid": user.session_id,
    }


# ── Request principal ────────────────────────────────────────────────────────

def _unauthenticated(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_session(
    credentials: Optional[HTTPAuthorizationCredentials],
    repo: MonitoringRepository,
) -> Optional[tuple]:
    """
    Validate a bearer credential against the stored session.
    Returns (user, claims), or None when there is no live session.
    """
    if credentials is None:
        return None
    payload = decode_access_token(credentials.credentials)
    if payload is None or payload.get("type") != "access":
        return None
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        return None
    user = repo.get_user(user_id)
    if not user or not user.session_id or user.session_id != payload.get("sid"):
        return None
    return user, payload


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    repo: MonitoringRepository = Depends(get_repository),
) -> User:
    session = resolve_session(credentials, repo)
    if session is None:
        raise _unauthenticated()
    return session[0]


def get_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    repo: MonitoringRepository = Depends(get_repository),
) -> Principal:
    """The authenticated principal for this request; 401 when there is none."""
    session = resolve_session(credentials, repo)
    if session is None:
        raise _unauthenticated()
    user, payload = session
    try:
        return principal_for(user.id, payload.get("role"), payload.get("related_patient_id"))
    except ValueError:
        logger.warning("Session for user %s carries unknown role %r", user.id, payload.get("role"))
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")


# ── Guard decisions → HTTP ───────────────────────────────────────────────────

def raise_for_decision(decision: Decision, principal: Optional[Principal] = None, target: str = "") -> None:
    """Map a guard decision onto the HTTP error the caller should see."""
    if decision == Decision.ALLOW:
        return
    if decision == Decision.UNAUTHENTICATED:
        raise _unauthenticated()
    logger.info(
        "Access denied: user=%s role=%s target=%s",
        getattr(principal, "user_id", None),
        getattr(principal, "role", None),
        target,
    )
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")


def require_patient_access(
    patient_id: int,
    principal: Principal = Depends(get_principal),
) -> Principal:
    """Dependency for routes addressed by a patient id."""
    raise_for_decision(authorize(principal, patient_id), principal, f"patient:{patient_id}")
    return principal


def require_collection_access(principal: Principal = Depends(get_principal)) -> Principal:
    """Dependency for routes spanning every patient."""
    raise_for_decision(authorize_collection(principal), principal, "patients:*")
    return principal


def require_call_access(
    call_id: int,
    principal: Principal = Depends(get_principal),
    repo: MonitoringRepository = Depends(get_repository),
) -> Call:
    """
    Dependency for routes addressed by a call id.

    The call is resolved to its owning patient first, so a missing call is a
    404 even for callers who could not have read it.
    """
    patient_id = repo.lookup_owning_patient_id(call_id)
    if patient_id is None:
        raise HTTPException(status_code=404, detail="Call not found")
    raise_for_decision(authorize(principal, patient_id), principal, f"call:{call_id}")
    return repo.get_call(call_id)
