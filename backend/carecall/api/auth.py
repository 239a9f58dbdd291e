"""Authentication endpoints: register, login, logout, refresh, current user."""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, ConfigDict, Field

from ..models.user import User, UserRole
from ..core.security import (
    bearer_scheme,
    create_access_token,
    create_refresh_token,
    decode_access_token,
    get_current_user,
    get_password_hash,
    new_session_id,
    resolve_session,
    session_claims,
    verify_password,
)
from ..services.repository import MonitoringRepository, get_repository

router = APIRouter(tags=["auth"])


# ── Request / Response schemas ──────────────────────────────────────────────

class RegisterRequest(BaseModel):
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)
    full_name: str
    role: str = UserRole.CLINICIAN
    hospital: Optional[str] = None
    related_patient_id: Optional[int] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    relationship: Optional[str] = None


class LoginRequest(BaseModel):
    username: str
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    full_name: str
    role: str
    hospital: Optional[str]
    related_patient_id: Optional[int]
    contact_phone: Optional[str]
    contact_email: Optional[str]
    relationship: Optional[str]


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse


# ── Helpers ──────────────────────────────────────────────────────────────────

def _start_session(repo: MonitoringRepository, user: User) -> TokenResponse:
    """Open a fresh session for the user, replacing any previous one."""
    user.session_id = new_session_id()
    claims = session_claims(user)
    access_token = create_access_token(claims)
    refresh_token = create_refresh_token({"sub": claims["sub"], "sid": claims["sid"]})
    user.refresh_token = refresh_token
    repo.save(user)
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        user=UserResponse.model_validate(user),
    )


# ── Endpoints ────────────────────────────────────────────────────────────────

@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest, repo: MonitoringRepository = Depends(get_repository)):
    """Create an account and log it in."""
    if repo.get_user_by_username(req.username):
        raise HTTPException(status_code=400, detail="Username already exists")
    if req.role not in UserRole.ALL:
        raise HTTPException(status_code=400, detail=f"Role must be one of: {', '.join(UserRole.ALL)}")

    related_patient_id = None
    if req.role == UserRole.FAMILY:
        if req.related_patient_id is None or not repo.get_patient(req.related_patient_id):
            raise HTTPException(status_code=400, detail="Family accounts must be linked to an existing patient")
        related_patient_id = req.related_patient_id

    user = repo.create_user(
        username=req.username,
        hashed_password=get_password_hash(req.password),
        full_name=req.full_name,
        role=req.role,
        hospital=req.hospital,
        related_patient_id=related_patient_id,
        contact_phone=req.contact_phone,
        contact_email=req.contact_email,
        relationship=req.relationship,
    )
    return _start_session(repo, user)


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest, repo: MonitoringRepository = Depends(get_repository)):
    """Authenticate and receive access + refresh tokens."""
    user = repo.get_user_by_username(req.username)
    if not user or not verify_password(req.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _start_session(repo, user)


@router.post("/logout")
def logout(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    repo: MonitoringRepository = Depends(get_repository),
):
    """End the caller's session. Succeeds even when there is none."""
    session = resolve_session(credentials, repo)
    if session is not None:
        user = session[0]
        user.session_id = None
        user.refresh_token = None
        repo.save(user)
    return {"message": "Logged out successfully"}


@router.post("/refresh", response_model=TokenResponse)
def refresh_token(req: RefreshRequest, repo: MonitoringRepository = Depends(get_repository)):
    """Exchange a valid refresh token for a new token pair within the same session."""
    payload = decode_access_token(req.refresh_token)
    if payload is None or payload.get("type") != "refresh":
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    try:
        user = repo.get_user(int(payload.get("sub")))
    except (TypeError, ValueError):
        user = None
    if not user or user.refresh_token != req.refresh_token or user.session_id != payload.get("sid"):
        raise HTTPException(status_code=401, detail="Refresh token revoked or invalid")

    claims = session_claims(user)
    new_access = create_access_token(claims)
    new_refresh = create_refresh_token({"sub": claims["sub"], "sid": claims["sid"]})
    user.refresh_token = new_refresh
    repo.save(user)
    return TokenResponse(
        access_token=new_access,
        refresh_token=new_refresh,
        user=UserResponse.model_validate(user),
    )


@router.get("/user", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Return the currently authenticated user's profile."""
    return current_user
