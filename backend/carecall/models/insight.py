from sqlalchemy import Column, String, Text, ForeignKey, JSON, Integer
from .base import Base, TimestampMixin
from .call import RiskLevel


class HealthTrend(Base, TimestampMixin):
    __tablename__ = "health_trends"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    date = Column(String(50), nullable=False)
    summary = Column(Text, nullable=False)
    risk = Column(String(20), nullable=False, default=RiskLevel.LOW)


class RecommendedAction(Base, TimestampMixin):
    __tablename__ = "recommended_actions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    category = Column(String(200), nullable=False)
    actions = Column(JSON, nullable=False, default=list)  # list of action strings
