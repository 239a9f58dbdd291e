from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from .base import Base, TimestampMixin


class Patient(Base, TimestampMixin):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # PHI fields
    name = Column(String(200), nullable=False)
    initials = Column(String(10), nullable=False)
    mrn = Column(String(50), unique=True, nullable=False, index=True)  # Medical Record Number
    age = Column(Integer, nullable=False)
    gender = Column(String(20), nullable=False)
    phone = Column(String(50), nullable=False)
    address = Column(Text, nullable=True)
    emergency_contact = Column(Text, nullable=True)

    # users.related_patient_id points back here, so this edge is added after both tables exist
    primary_doctor_id = Column(
        Integer,
        ForeignKey("users.id", use_alter=True, name="fk_patients_primary_doctor_id"),
        nullable=True,
    )

    # Denormalised from the patient's alerts, see services.alert_engine
    has_red_alert = Column(Boolean, nullable=False, default=False)
    has_yellow_alert = Column(Boolean, nullable=False, default=False)
    last_call_date = Column(String(50), nullable=True)
