"""User profile lookup, used by the family portal to show the care team."""
from fastapi import APIRouter, Depends, HTTPException

from ..core.permissions import Family, Principal, authorize_profile
from ..core.security import get_principal, raise_for_decision
from ..services.repository import MonitoringRepository, get_repository
from .auth import UserResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    principal: Principal = Depends(get_principal),
    repo: MonitoringRepository = Depends(get_repository),
):
    primary_doctor_id = None
    if isinstance(principal, Family) and principal.related_patient_id is not None:
        patient = repo.get_patient(principal.related_patient_id)
        primary_doctor_id = patient.primary_doctor_id if patient else None

    raise_for_decision(
        authorize_profile(principal, user_id, primary_doctor_id),
        principal,
        f"user:{user_id}",
    )
    user = repo.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
