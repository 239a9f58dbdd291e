"""End-to-end access rules for the HTTP API, run against the demo data."""
import pytest

from carecall.models.audit import AuditLog
from carecall.services.repository import MonitoringRepository

PROTECTED_GETS = [
    "/api/user",
    "/api/users/1",
    "/api/patients",
    "/api/patients/recent",
    "/api/patients/1",
    "/api/patients/1/calls",
    "/api/patients/1/latest-call",
    "/api/patients/1/assessments",
    "/api/patients/1/latest-assessment",
    "/api/patients/1/latest-findings",
    "/api/patients/1/health-trends",
    "/api/patients/1/recommended-actions",
    "/api/patients/1/alerts",
    "/api/calls/1",
    "/api/calls/1/assessment",
    "/api/calls/1/findings",
    # Missing or malformed targets are still 401 first
    "/api/calls/999",
    "/api/patients/999/alerts",
    "/api/patients/not-a-number",
]


@pytest.fixture()
def other_patient_call(session_factory, seeded):
    """A call owned by patient 2, who is not linked to the family account."""
    db = session_factory()
    try:
        call = MonitoringRepository(db).create_call(
            patient_id=2, date="April 17, 2023", time="9:05 AM", duration_seconds=420, transcript=[]
        )
        return call.id
    finally:
        db.close()


class TestUnauthenticated:
    @pytest.mark.parametrize("path", PROTECTED_GETS)
    def test_no_session_is_401(self, client, path):
        resp = client.get(path)
        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"

    def test_create_patient_without_session_is_401(self, client):
        resp = client.post("/api/patients", json={})
        assert resp.status_code == 401

    def test_garbage_token_is_401(self, client):
        resp = client.get("/api/patients/1", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    def test_health_is_public(self, client):
        assert client.get("/health").json()["status"] == "healthy"


class TestFamilyAccess:
    def test_own_latest_assessment_allowed(self, client, family_headers):
        resp = client.get("/api/patients/1/latest-assessment", headers=family_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["patient_id"] == 1
        assert body["frailty"] == {"score": 0.8, "risk": "high"}
        assert body["medication_adherence"] == {"score": 0.5, "risk": "moderate"}

    def test_other_patient_assessment_forbidden(self, client, family_headers):
        resp = client.get("/api/patients/2/latest-assessment", headers=family_headers)
        assert resp.status_code == 403

    def test_unknown_patient_forbidden_not_found(self, client, family_headers):
        resp = client.get("/api/patients/999", headers=family_headers)
        assert resp.status_code == 403

    @pytest.mark.parametrize("path", ["/api/patients", "/api/patients/recent"])
    def test_collections_forbidden(self, client, family_headers, path):
        assert client.get(path, headers=family_headers).status_code == 403

    def test_cannot_create_patient(self, client, family_headers):
        resp = client.post(
            "/api/patients",
            json={"name": "New Person", "mrn": "555555", "age": 70, "gender": "Male", "phone": "5551234567"},
            headers=family_headers,
        )
        assert resp.status_code == 403

    @pytest.mark.parametrize("suffix", [
        "", "/calls", "/latest-call", "/assessments", "/latest-findings",
        "/health-trends", "/recommended-actions", "/alerts",
    ])
    def test_own_patient_resources_allowed(self, client, family_headers, suffix):
        assert client.get(f"/api/patients/1{suffix}", headers=family_headers).status_code == 200

    def test_own_call_allowed(self, client, family_headers):
        resp = client.get("/api/calls/1", headers=family_headers)
        assert resp.status_code == 200
        assert resp.json()["transcript"][0]["speaker"] == "AI"

    def test_call_of_other_patient_forbidden(self, client, family_headers, other_patient_call):
        for path in ("", "/assessment", "/findings"):
            resp = client.get(f"/api/calls/{other_patient_call}{path}", headers=family_headers)
            assert resp.status_code == 403

    def test_missing_call_not_found(self, client, family_headers):
        resp = client.get("/api/calls/999", headers=family_headers)
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Call not found"

    def test_can_read_primary_doctor_profile(self, client, family_headers):
        resp = client.get("/api/users/1", headers=family_headers)
        assert resp.status_code == 200
        assert resp.json()["full_name"] == "Dr. Sarah Chen"
        assert "hashed_password" not in resp.json()

    def test_cannot_read_unrelated_profile(self, client, family_headers):
        client.post("/api/register", json={
            "username": "drpatel", "password": "secret123", "full_name": "Dr. Patel", "role": "clinician",
        })
        resp = client.get("/api/users/3", headers=family_headers)
        assert resp.status_code == 403


class TestClinicianAccess:
    @pytest.mark.parametrize("patient_id", [1, 2, 3])
    def test_any_patient_alerts_allowed(self, client, clinician_headers, patient_id):
        assert client.get(f"/api/patients/{patient_id}/alerts", headers=clinician_headers).status_code == 200

    def test_alerts_summarised(self, client, clinician_headers):
        alerts = client.get("/api/patients/1/alerts", headers=clinician_headers).json()
        assert {"category": "Frailty: High Risk", "type": "red"} in alerts
        assert all(set(a) == {"category", "type"} for a in alerts)

    def test_lists_all_patients(self, client, clinician_headers):
        resp = client.get("/api/patients", headers=clinician_headers)
        assert [p["name"] for p in resp.json()] == ["John Doe", "Margaret Smith", "Robert Johnson"]

    def test_recent_patients_limit(self, client, clinician_headers):
        resp = client.get("/api/patients/recent?limit=2", headers=clinician_headers)
        assert len(resp.json()) == 2

    def test_other_patient_call_allowed(self, client, clinician_headers, other_patient_call):
        assert client.get(f"/api/calls/{other_patient_call}", headers=clinician_headers).status_code == 200

    def test_call_without_assessment_is_404(self, client, clinician_headers, other_patient_call):
        resp = client.get(f"/api/calls/{other_patient_call}/assessment", headers=clinician_headers)
        assert resp.status_code == 404
        assert resp.json()["detail"] == "No assessment found for this call"

    def test_missing_patient_not_found(self, client, clinician_headers):
        resp = client.get("/api/patients/999", headers=clinician_headers)
        assert resp.status_code == 404

    def test_patient_without_calls(self, client, clinician_headers):
        assert client.get("/api/patients/3/latest-call", headers=clinician_headers).status_code == 404
        assert client.get("/api/patients/3/latest-findings", headers=clinician_headers).json() == []

    def test_malformed_id_is_422(self, client, clinician_headers):
        assert client.get("/api/calls/abc", headers=clinician_headers).status_code == 422

    def test_create_patient(self, client, clinician_headers):
        resp = client.post(
            "/api/patients",
            json={"name": "Eleanor Rigby", "mrn": "432768", "age": 88, "gender": "Female", "phone": "(555) 456-7890"},
            headers=clinician_headers,
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["initials"] == "ER"
        assert body["primary_doctor_id"] == 1
        assert body["has_red_alert"] is False

    def test_create_patient_duplicate_mrn(self, client, clinician_headers):
        resp = client.post(
            "/api/patients",
            json={"name": "Someone Else", "mrn": "432765", "age": 70, "gender": "Male", "phone": "5551234567"},
            headers=clinician_headers,
        )
        assert resp.status_code == 400

    def test_create_patient_validates_age(self, client, clinician_headers):
        resp = client.post(
            "/api/patients",
            json={"name": "Too Young", "mrn": "111111", "age": 12, "gender": "Male", "phone": "5551234567"},
            headers=clinician_headers,
        )
        assert resp.status_code == 422


class TestAuditTrail:
    def test_patient_reads_are_logged(self, client, clinician_headers, db):
        client.get("/api/patients/2", headers=clinician_headers)
        log = db.query(AuditLog).filter(AuditLog.request_path == "/api/patients/2").first()
        assert log is not None
        assert log.user_id == "1"
        assert log.action == "view"
        assert log.resource_type == "patients"
        assert log.resource_id == "2"
        assert log.status_code == 200

    def test_denials_are_logged_with_status(self, client, family_headers, db):
        client.get("/api/patients/2", headers=family_headers)
        log = db.query(AuditLog).filter(AuditLog.request_path == "/api/patients/2").first()
        assert log.status_code == 403
