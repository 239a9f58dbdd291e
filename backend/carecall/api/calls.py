"""Call endpoints: transcript, per-call assessment and findings."""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict

from ..core.security import require_call_access
from ..models.call import Assessment, Call
from ..services.repository import MonitoringRepository, get_repository

router = APIRouter(prefix="/calls", tags=["calls"])


class CallResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    date: str
    time: str
    duration_seconds: int
    audio_url: Optional[str]
    transcript: List[Dict[str, Any]]


class DomainScore(BaseModel):
    score: float  # 0-1
    risk: str


class AssessmentResponse(BaseModel):
    id: int
    patient_id: int
    call_id: int
    date: str
    frailty: DomainScore
    adl: DomainScore
    iadl: DomainScore
    medication_adherence: DomainScore
    cardiac_risk_factors: DomainScore

    @classmethod
    def from_assessment(cls, assessment: Assessment) -> "AssessmentResponse":
        return cls(
            id=assessment.id,
            patient_id=assessment.patient_id,
            call_id=assessment.call_id,
            date=assessment.date,
            **{domain: assessment.domain(domain) for domain in Assessment.DOMAINS},
        )


class FindingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    call_id: int
    patient_id: int
    text: str
    risk: str


@router.get("/{call_id}", response_model=CallResponse)
def get_call(call: Call = Depends(require_call_access)):
    return call


@router.get("/{call_id}/assessment", response_model=AssessmentResponse)
def get_call_assessment(
    call: Call = Depends(require_call_access),
    repo: MonitoringRepository = Depends(get_repository),
):
    assessment = repo.assessment_for_call(call.id)
    if not assessment:
        raise HTTPException(status_code=404, detail="No assessment found for this call")
    return AssessmentResponse.from_assessment(assessment)


@router.get("/{call_id}/findings", response_model=List[FindingResponse])
def get_call_findings(
    call: Call = Depends(require_call_access),
    repo: MonitoringRepository = Depends(get_repository),
):
    return repo.findings_for_call(call.id)
