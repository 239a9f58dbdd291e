from sqlalchemy import Column, ForeignKey, Integer, String
from .base import Base, TimestampMixin


class UserRole:
    CLINICIAN = "clinician"
    FAMILY = "family"

    ALL = [CLINICIAN, FAMILY]


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(200), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.CLINICIAN)
    hospital = Column(String(200), nullable=True)

    # Family members are linked to exactly one patient
    related_patient_id = Column(Integer, ForeignKey("patients.id"), nullable=True)
    contact_phone = Column(String(50), nullable=True)
    contact_email = Column(String(255), nullable=True)
    relationship = Column(String(50), nullable=True)  # "son", "daughter", "spouse", ...

    # Current session; cleared at logout
    session_id = Column(String(64), nullable=True)
    refresh_token = Column(String(1024), nullable=True)
