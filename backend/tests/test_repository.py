"""Tests for MonitoringRepository lookups and orderings."""
from datetime import datetime, timedelta

import pytest

from carecall.models.call import RiskLevel


def _patient(repo, mrn="100001", name="Ada Lovelace"):
    return repo.create_patient(
        name=name, initials="AL", mrn=mrn, age=80, gender="Female", phone="(555) 000-0000"
    )


def _call(repo, patient_id, created_at=None, date="May 1, 2023"):
    fields = dict(patient_id=patient_id, date=date, time="9:00 AM", duration_seconds=300, transcript=[])
    if created_at is not None:
        fields["created_at"] = created_at
    return repo.create_call(**fields)


def _assessment(repo, call, risk=RiskLevel.LOW):
    return repo.create_assessment(
        call_id=call.id,
        patient_id=call.patient_id,
        date=call.date,
        frailty_score=10, frailty_risk=risk,
        adl_score=10, adl_risk=RiskLevel.LOW,
        iadl_score=10, iadl_risk=RiskLevel.LOW,
        medication_adherence_score=10, medication_adherence_risk=RiskLevel.LOW,
        cardiac_risk_factors_score=10, cardiac_risk_factors_risk=RiskLevel.LOW,
    )


class TestCalls:
    def test_calls_listed_newest_first(self, repo):
        patient = _patient(repo)
        now = datetime.utcnow()
        older = _call(repo, patient.id, created_at=now - timedelta(days=3))
        newer = _call(repo, patient.id, created_at=now)
        assert [c.id for c in repo.list_calls(patient.id)] == [newer.id, older.id]
        assert repo.latest_call(patient.id).id == newer.id

    def test_latest_call_breaks_ties_by_id(self, repo):
        patient = _patient(repo)
        stamp = datetime(2023, 4, 18, 10, 0)
        _call(repo, patient.id, created_at=stamp)
        second = _call(repo, patient.id, created_at=stamp)
        assert repo.latest_call(patient.id).id == second.id

    def test_latest_call_none_without_calls(self, repo):
        patient = _patient(repo)
        assert repo.latest_call(patient.id) is None

    def test_lookup_owning_patient_id(self, repo):
        first = _patient(repo, mrn="100001")
        second = _patient(repo, mrn="100002", name="Grace Hopper")
        call = _call(repo, second.id)
        assert repo.lookup_owning_patient_id(call.id) == second.id
        assert repo.lookup_owning_patient_id(call.id) != first.id

    def test_lookup_owning_patient_id_missing_call(self, repo):
        assert repo.lookup_owning_patient_id(999) is None


class TestFindings:
    def test_latest_findings_empty_without_calls(self, repo):
        patient = _patient(repo)
        assert repo.latest_findings(patient.id) == []

    def test_latest_findings_come_from_latest_call_only(self, repo):
        patient = _patient(repo)
        now = datetime.utcnow()
        old_call = _call(repo, patient.id, created_at=now - timedelta(days=7))
        new_call = _call(repo, patient.id, created_at=now)
        repo.create_finding(call_id=old_call.id, patient_id=patient.id, text="old", risk=RiskLevel.LOW)
        repo.create_finding(call_id=new_call.id, patient_id=patient.id, text="new", risk=RiskLevel.HIGH)
        assert [f.text for f in repo.latest_findings(patient.id)] == ["new"]


class TestAssessments:
    def test_assessment_for_call(self, repo):
        patient = _patient(repo)
        call = _call(repo, patient.id)
        assessment = _assessment(repo, call)
        assert repo.assessment_for_call(call.id).id == assessment.id
        assert repo.assessment_for_call(call.id + 1) is None

    def test_latest_assessment(self, repo):
        patient = _patient(repo)
        first = _assessment(repo, _call(repo, patient.id))
        second = _assessment(repo, _call(repo, patient.id), risk=RiskLevel.HIGH)
        assert repo.latest_assessment(patient.id).id == second.id
        assert [a.id for a in repo.list_assessments(patient.id)] == [second.id, first.id]

    def test_domain_scores_scaled(self, repo):
        patient = _patient(repo)
        assessment = _assessment(repo, _call(repo, patient.id))
        assert assessment.domain("frailty") == {"score": pytest.approx(0.1), "risk": RiskLevel.LOW}


class TestPatients:
    def test_recent_patients_respects_limit(self, repo):
        for i in range(4):
            _patient(repo, mrn=f"20000{i}", name=f"Patient {i}")
        recent = repo.recent_patients(limit=2)
        assert len(recent) == 2
        assert [p.mrn for p in recent] == ["200000", "200001"]

    def test_health_trends_newest_first(self, repo):
        patient = _patient(repo)
        now = datetime.utcnow()
        repo.create_health_trend(patient_id=patient.id, date="a", summary="older", risk=RiskLevel.LOW,
                                 created_at=now - timedelta(days=14))
        repo.create_health_trend(patient_id=patient.id, date="b", summary="newer", risk=RiskLevel.HIGH,
                                 created_at=now)
        assert [t.summary for t in repo.health_trends(patient.id)] == ["newer", "older"]
