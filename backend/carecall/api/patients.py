from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from ..core.config import settings
from ..core.permissions import Principal
from ..core.security import require_collection_access, require_patient_access
from ..services.repository import MonitoringRepository, get_repository
from .calls import AssessmentResponse, CallResponse, FindingResponse

router = APIRouter(prefix="/patients", tags=["patients"])


class PatientCreate(BaseModel):
    name: str = Field(min_length=2)
    initials: Optional[str] = None
    mrn: str = Field(min_length=3)
    age: int = Field(ge=18, le=120)
    gender: str
    phone: str = Field(min_length=7)
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    primary_doctor_id: Optional[int] = None


class PatientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    initials: str
    mrn: str
    age: int
    gender: str
    phone: str
    address: Optional[str]
    emergency_contact: Optional[str]
    primary_doctor_id: Optional[int]
    has_red_alert: bool
    has_yellow_alert: bool
    last_call_date: Optional[str]


class HealthTrendResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    date: str
    summary: str
    risk: str


class RecommendedActionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    category: str
    actions: List[str]


def initials_for(name: str) -> str:
    """First and last initials of a name, e.g. "John Doe" -> "JD"."""
    parts = name.split()
    if not parts:
        return ""
    if len(parts) == 1:
        return parts[0][0].upper()
    return (parts[0][0] + parts[-1][0]).upper()


# ── Collection ──────────────────────────────────────────────────────────────

@router.get("", response_model=List[PatientResponse])
def list_patients(
    _principal: Principal = Depends(require_collection_access),
    repo: MonitoringRepository = Depends(get_repository),
):
    return repo.list_patients()


@router.post("", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
def create_patient(
    patient_in: PatientCreate,
    principal: Principal = Depends(require_collection_access),
    repo: MonitoringRepository = Depends(get_repository),
):
    if repo.get_patient_by_mrn(patient_in.mrn):
        raise HTTPException(status_code=400, detail="Patient MRN already exists")
    fields = patient_in.model_dump()
    fields["initials"] = patient_in.initials or initials_for(patient_in.name)
    if fields["primary_doctor_id"] is None:
        fields["primary_doctor_id"] = principal.user_id
    return repo.create_patient(**fields)


@router.get("/recent", response_model=List[PatientResponse])
def recent_patients(
    limit: Optional[int] = Query(None, ge=1, le=100),
    _principal: Principal = Depends(require_collection_access),
    repo: MonitoringRepository = Depends(get_repository),
):
    return repo.recent_patients(limit or settings.RECENT_PATIENTS_LIMIT)


# ── Single patient ──────────────────────────────────────────────────────────

@router.get("/{patient_id}", response_model=PatientResponse)
def get_patient(
    patient_id: int,
    _principal: Principal = Depends(require_patient_access),
    repo: MonitoringRepository = Depends(get_repository),
):
    patient = repo.get_patient(patient_id)
    if not patient:
        raise HTTPException(status_code=404, detail="Patient not found")
    return patient


@router.get("/{patient_id}/calls", response_model=List[CallResponse])
def list_calls(
    patient_id: int,
    _principal: Principal = Depends(require_patient_access),
    repo: MonitoringRepository = Depends(get_repository),
):
    return repo.list_calls(patient_id)


@router.get("/{patient_id}/latest-call", response_model=CallResponse)
def latest_call(
    patient_id: int,
    _principal: Principal = Depends(require_patient_access),
    repo: MonitoringRepository = Depends(get_repository),
):
    call = repo.latest_call(patient_id)
    if not call:
        raise HTTPException(status_code=404, detail="No calls found for this patient")
    return call


@router.get("/{patient_id}/assessments", response_model=List[AssessmentResponse])
def list_assessments(
    patient_id: int,
    _principal: Principal = Depends(require_patient_access),
    repo: MonitoringRepository = Depends(get_repository),
):
    return [AssessmentResponse.from_assessment(a) for a in repo.list_assessments(patient_id)]


@router.get("/{patient_id}/latest-assessment", response_model=AssessmentResponse)
def latest_assessment(
    patient_id: int,
    _principal: Principal = Depends(require_patient_access),
    repo: MonitoringRepository = Depends(get_repository),
):
    assessment = repo.latest_assessment(patient_id)
    if not assessment:
        raise HTTPException(status_code=404, detail="No assessments found for this patient")
    return AssessmentResponse.from_assessment(assessment)


@router.get("/{patient_id}/latest-findings", response_model=List[FindingResponse])
def latest_findings(
    patient_id: int,
    _principal: Principal = Depends(require_patient_access),
    repo: MonitoringRepository = Depends(get_repository),
):
    return repo.latest_findings(patient_id)


@router.get("/{patient_id}/health-trends", response_model=List[HealthTrendResponse])
def health_trends(
    patient_id: int,
    _principal: Principal = Depends(require_patient_access),
    repo: MonitoringRepository = Depends(get_repository),
):
    return repo.health_trends(patient_id)


@router.get("/{patient_id}/recommended-actions", response_model=List[RecommendedActionResponse])
def recommended_actions(
    patient_id: int,
    _principal: Principal = Depends(require_patient_access),
    repo: MonitoringRepository = Depends(get_repository),
):
    return repo.recommended_actions(patient_id)
