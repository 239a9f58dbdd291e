"""Alerts API: the dashboard's per-patient alert summary."""
from fastapi import APIRouter, Depends
from typing import List
from pydantic import BaseModel, ConfigDict

from ..core.permissions import Principal
from ..core.security import require_patient_access
from ..services.repository import MonitoringRepository, get_repository

router = APIRouter(prefix="/patients", tags=["alerts"])


class AlertSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category: str
    type: str


@router.get("/{patient_id}/alerts", response_model=List[AlertSummary])
def list_alerts(
    patient_id: int,
    _principal: Principal = Depends(require_patient_access),
    repo: MonitoringRepository = Depends(get_repository),
):
    """List a patient's alerts as {category, type} pairs."""
    return repo.alerts(patient_id)
