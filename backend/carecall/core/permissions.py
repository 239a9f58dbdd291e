"""
Access guard for CareCall.

Decides whether an authenticated principal may read a patient's data.
Clinicians see every patient; a family member sees only the one patient
their account is linked to, and never the patient collection.

The functions here are pure: they take the principal and the target
patient id and return a Decision. Resolving a call id to its owning
patient, and turning a Decision into an HTTP status, happen in the
caller (see core.security).
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ..models.user import UserRole


class Decision(str, Enum):
    ALLOW = "allow"
    FORBIDDEN = "forbidden"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class Clinician:
    user_id: int

    @property
    def role(self) -> str:
        return UserRole.CLINICIAN


@dataclass(frozen=True)
class Family:
    user_id: int
    related_patient_id: Optional[int]

    @property
    def role(self) -> str:
        return UserRole.FAMILY


Principal = Union[Clinician, Family]


def principal_for(user_id: int, role: str, related_patient_id: Optional[int] = None) -> Principal:
    """Build the principal for a role string; unknown roles raise ValueError."""
    if role == UserRole.CLINICIAN:
        return Clinician(user_id=user_id)
    if role == UserRole.FAMILY:
        return Family(user_id=user_id, related_patient_id=related_patient_id)
    raise ValueError(f"Unknown role: {role!r}")


def authorize(principal: Optional[Principal], patient_id: int) -> Decision:
    """Decide access to a single patient's resources."""
    if principal is None:
        return Decision.UNAUTHENTICATED
    if isinstance(principal, Clinician):
        return Decision.ALLOW
    if isinstance(principal, Family):
        if principal.related_patient_id is not None and principal.related_patient_id == patient_id:
            return Decision.ALLOW
        return Decision.FORBIDDEN
    raise TypeError(f"Unhandled principal type: {type(principal).__name__}")


def authorize_collection(principal: Optional[Principal]) -> Decision:
    """Decide access to resources spanning all patients (lists, creation)."""
    if principal is None:
        return Decision.UNAUTHENTICATED
    if isinstance(principal, Clinician):
        return Decision.ALLOW
    if isinstance(principal, Family):
        return Decision.FORBIDDEN
    raise TypeError(f"Unhandled principal type: {type(principal).__name__}")


def authorize_profile(
    principal: Optional[Principal],
    user_id: int,
    primary_doctor_id: Optional[int] = None,
) -> Decision:
    """Decide access to a user profile.

    Everyone may read their own profile. A family member may also read the
    profile of their patient's primary doctor, passed in as primary_doctor_id.
    """
    if principal is None:
        return Decision.UNAUTHENTICATED
    if principal.user_id == user_id:
        return Decision.ALLOW
    if isinstance(principal, Clinician):
        return Decision.ALLOW
    if isinstance(principal, Family):
        if primary_doctor_id is not None and primary_doctor_id == user_id:
            return Decision.ALLOW
        return Decision.FORBIDDEN
    raise TypeError(f"Unhandled principal type: {type(principal).__name__}")
