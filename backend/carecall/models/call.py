from typing import Dict, Optional
from sqlalchemy import Column, String, Text, ForeignKey, JSON, Integer
from .base import Base, TimestampMixin


class RiskLevel:
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"

    ALL = [LOW, MODERATE, HIGH]


class Call(Base, TimestampMixin):
    """One automated check-in call and its transcript."""
    __tablename__ = "calls"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    date = Column(String(50), nullable=False)  # display date, e.g. "April 18, 2023"
    time = Column(String(20), nullable=False)
    duration_seconds = Column(Integer, nullable=False)
    audio_url = Column(String(500), nullable=True)

    # [{id, speaker, speaker_name, text, highlight_type?}, ...]
    transcript = Column(JSON, nullable=False, default=list)


class Assessment(Base, TimestampMixin):
    __tablename__ = "assessments"

    # Scored domains; each has <domain>_score (0-100) and <domain>_risk columns
    DOMAINS = (
        "frailty",
        "adl",
        "iadl",
        "medication_adherence",
        "cardiac_risk_factors",
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    call_id = Column(Integer, ForeignKey("calls.id"), nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    date = Column(String(50), nullable=False)

    frailty_score = Column(Integer, nullable=False)
    frailty_risk = Column(String(20), nullable=False)
    adl_score = Column(Integer, nullable=False)
    adl_risk = Column(String(20), nullable=False)
    iadl_score = Column(Integer, nullable=False)
    iadl_risk = Column(String(20), nullable=False)
    medication_adherence_score = Column(Integer, nullable=False)
    medication_adherence_risk = Column(String(20), nullable=False)
    cardiac_risk_factors_score = Column(Integer, nullable=False)
    cardiac_risk_factors_risk = Column(String(20), nullable=False)

    def domain(self, name: str) -> Dict[str, Optional[object]]:
        """Score (scaled to 0-1) and risk label for one domain."""
        score = getattr(self, f"{name}_score")
        return {
            "score": score / 100 if score is not None else None,
            "risk": getattr(self, f"{name}_risk"),
        }


class Finding(Base, TimestampMixin):
    __tablename__ = "findings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    call_id = Column(Integer, ForeignKey("calls.id"), nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    risk = Column(String(20), nullable=False, default=RiskLevel.LOW)
