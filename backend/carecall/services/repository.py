"""
Storage access for monitoring data.

Route handlers and the access guard's callers depend on this repository
rather than on the ORM session directly, so the backing store can be
swapped without touching the HTTP layer.
"""
from typing import List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from ..models.alert import Alert
from ..models.audit import AuditLog  # noqa: F401  registers audit_logs with Base.metadata
from ..models.base import get_db
from ..models.call import Assessment, Call, Finding
from ..models.insight import HealthTrend, RecommendedAction
from ..models.patient import Patient
from ..models.user import User


class MonitoringRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def _add(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    # ── Users ────────────────────────────────────────────────────────────────

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def create_user(self, **fields) -> User:
        return self._add(User(**fields))

    def save(self, obj):
        """Persist changes made to an already-loaded record."""
        return self._add(obj)

    # ── Patients ─────────────────────────────────────────────────────────────

    def list_patients(self) -> List[Patient]:
        return self.db.query(Patient).order_by(Patient.id).all()

    def recent_patients(self, limit: int = 5) -> List[Patient]:
        return self.db.query(Patient).order_by(Patient.id).limit(limit).all()

    def get_patient(self, patient_id: int) -> Optional[Patient]:
        return self.db.get(Patient, patient_id)

    def get_patient_by_mrn(self, mrn: str) -> Optional[Patient]:
        return self.db.query(Patient).filter(Patient.mrn == mrn).first()

    def create_patient(self, **fields) -> Patient:
        return self._add(Patient(**fields))

    # ── Calls ────────────────────────────────────────────────────────────────

    def list_calls(self, patient_id: int) -> List[Call]:
        return (
            self.db.query(Call)
            .filter(Call.patient_id == patient_id)
            .order_by(Call.created_at.desc(), Call.id.desc())
            .all()
        )

    def get_call(self, call_id: int) -> Optional[Call]:
        return self.db.get(Call, call_id)

    def latest_call(self, patient_id: int) -> Optional[Call]:
        return (
            self.db.query(Call)
            .filter(Call.patient_id == patient_id)
            .order_by(Call.created_at.desc(), Call.id.desc())
            .first()
        )

    def create_call(self, **fields) -> Call:
        return self._add(Call(**fields))

    def lookup_owning_patient_id(self, call_id: int) -> Optional[int]:
        """Patient id that owns a call, or None when the call does not exist."""
        row = self.db.query(Call.patient_id).filter(Call.id == call_id).first()
        return row[0] if row else None

    # ── Assessments ──────────────────────────────────────────────────────────

    def list_assessments(self, patient_id: int) -> List[Assessment]:
        return (
            self.db.query(Assessment)
            .filter(Assessment.patient_id == patient_id)
            .order_by(Assessment.created_at.desc(), Assessment.id.desc())
            .all()
        )

    def get_assessment(self, assessment_id: int) -> Optional[Assessment]:
        return self.db.get(Assessment, assessment_id)

    def assessment_for_call(self, call_id: int) -> Optional[Assessment]:
        return (
            self.db.query(Assessment)
            .filter(Assessment.call_id == call_id)
            .order_by(Assessment.id)
            .first()
        )

    def latest_assessment(self, patient_id: int) -> Optional[Assessment]:
        return (
            self.db.query(Assessment)
            .filter(Assessment.patient_id == patient_id)
            .order_by(Assessment.created_at.desc(), Assessment.id.desc())
            .first()
        )

    def create_assessment(self, **fields) -> Assessment:
        return self._add(Assessment(**fields))

    # ── Findings ─────────────────────────────────────────────────────────────

    def findings_for_call(self, call_id: int) -> List[Finding]:
        return self.db.query(Finding).filter(Finding.call_id == call_id).order_by(Finding.id).all()

    def latest_findings(self, patient_id: int) -> List[Finding]:
        call = self.latest_call(patient_id)
        if not call:
            return []
        return self.findings_for_call(call.id)

    def create_finding(self, **fields) -> Finding:
        return self._add(Finding(**fields))

    # ── Health trends ────────────────────────────────────────────────────────

    def health_trends(self, patient_id: int) -> List[HealthTrend]:
        return (
            self.db.query(HealthTrend)
            .filter(HealthTrend.patient_id == patient_id)
            .order_by(HealthTrend.created_at.desc(), HealthTrend.id.desc())
            .all()
        )

    def create_health_trend(self, **fields) -> HealthTrend:
        return self._add(HealthTrend(**fields))

    # ── Recommended actions ──────────────────────────────────────────────────

    def recommended_actions(self, patient_id: int) -> List[RecommendedAction]:
        return (
            self.db.query(RecommendedAction)
            .filter(RecommendedAction.patient_id == patient_id)
            .order_by(RecommendedAction.id)
            .all()
        )

    def create_recommended_action(self, **fields) -> RecommendedAction:
        return self._add(RecommendedAction(**fields))

    # ── Alerts ───────────────────────────────────────────────────────────────

    def alerts(self, patient_id: int) -> List[Alert]:
        return self.db.query(Alert).filter(Alert.patient_id == patient_id).order_by(Alert.id).all()

    def create_alert(self, **fields) -> Alert:
        return self._add(Alert(**fields))


def get_repository(db: Session = Depends(get_db)) -> MonitoringRepository:
    """FastAPI dependency providing a request-scoped repository."""
    return MonitoringRepository(db)
