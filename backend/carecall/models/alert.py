from sqlalchemy import Column, String, Text, ForeignKey, Integer
from .base import Base, TimestampMixin


class AlertType:
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"


class Alert(Base, TimestampMixin):
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    type = Column(String(10), nullable=False)  # red, yellow, green
    category = Column(String(200), nullable=False)  # e.g. "Frailty: High Risk"
    description = Column(Text, nullable=False)
