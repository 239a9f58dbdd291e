from sqlalchemy import Column, String, Integer
from .base import Base, TimestampMixin


class AuditLog(Base, TimestampMixin):
    """Audit trail for every request that touches patient data."""
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(100), nullable=False)  # user id or "anonymous"
    action = Column(String(50), nullable=False)  # create, view, update, delete
    resource_type = Column(String(50), nullable=False)
    resource_id = Column(String(100), nullable=False)
    ip_address = Column(String(45), nullable=True)
    request_method = Column(String(10), nullable=True)
    request_path = Column(String(500), nullable=True)
    status_code = Column(Integer, nullable=True)
