"""
Audit logging middleware.
Auto-logs every request to patient-data endpoints (patients, calls, users).
"""
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from ..models.audit import AuditLog
from ..models import base
from ..core.security import decode_access_token

logger = logging.getLogger(__name__)

# Endpoints that touch PHI - requests to these paths are logged
PHI_PATH_PREFIXES = (
    "/api/patients",
    "/api/calls",
    "/api/users",
)

ACTION_MAP = {
    "GET": "view",
    "POST": "create",
    "PUT": "update",
    "PATCH": "update",
    "DELETE": "delete",
}


def describe_path(path: str):
    """Split an API path into (resource_type, resource_id)."""
    parts = [p for p in path.split("/") if p]
    resource_type = parts[1] if len(parts) >= 2 else "unknown"  # e.g. "patients"
    resource_id = parts[2] if len(parts) >= 3 else "*"
    return resource_type, resource_id


class AuditMiddleware(BaseHTTPMiddleware):
    """Middleware that auto-logs access to PHI endpoints."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        path = request.url.path
        if not any(path.startswith(prefix) for prefix in PHI_PATH_PREFIXES):
            return response
        if request.method not in ACTION_MAP:
            return response

        user_id = "anonymous"
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            payload = decode_access_token(auth_header[7:])
            if payload:
                user_id = payload.get("sub", "anonymous")

        resource_type, resource_id = describe_path(path)
        ip_address = request.client.host if request.client else None

        db = None
        try:
            db = base.SessionLocal()
            db.add(
                AuditLog(
                    user_id=str(user_id),
                    action=ACTION_MAP[request.method],
                    resource_type=resource_type,
                    resource_id=resource_id,
                    ip_address=ip_address,
                    request_method=request.method,
                    request_path=path,
                    status_code=response.status_code,
                )
            )
            db.commit()
        except Exception as exc:
            logger.warning(
                "Audit log write failed for %s %s (user=%s): %s",
                request.method, path, user_id, exc,
            )
        finally:
            if db is not None:
                db.close()

        return response
