"""
Rule-based alert engine for check-in assessments.
Run after an assessment is recorded for a call.
"""
import logging
from typing import Iterable, List, Tuple

from ..models.alert import Alert, AlertType
from ..models.call import Assessment, RiskLevel
from ..models.patient import Patient

logger = logging.getLogger(__name__)

# Display label for each scored domain
DOMAIN_LABELS = {
    "frailty": "Frailty",
    "adl": "ADL",
    "iadl": "IADL",
    "medication_adherence": "Medication Adherence",
    "cardiac_risk_factors": "Cardiac Risk Factors",
}

# Risk level -> (alert type, category suffix, description template)
RISK_RULES = {
    RiskLevel.HIGH: (
        AlertType.RED,
        "High Risk",
        "Patient shows significant {label} indicators requiring immediate attention",
    ),
    RiskLevel.MODERATE: (
        AlertType.YELLOW,
        "Moderate Risk",
        "Patient shows {label} indicators that should be reviewed",
    ),
}


def alerts_for_assessment(assessment: Assessment) -> List[Tuple[str, str, str]]:
    """
    Derive (type, category, description) triples from an assessment.
    Low-risk domains produce nothing.
    """
    derived = []
    for domain in Assessment.DOMAINS:
        risk = getattr(assessment, f"{domain}_risk")
        rule = RISK_RULES.get(risk)
        if rule is None:
            continue
        alert_type, suffix, template = rule
        label = DOMAIN_LABELS[domain]
        derived.append((alert_type, f"{label}: {suffix}", template.format(label=label.lower())))
    return derived


def refresh_alert_flags(patient: Patient, alerts: Iterable[Alert]) -> Patient:
    """Set the patient's red/yellow flags from the alert types present."""
    types = {a.type for a in alerts}
    patient.has_red_alert = AlertType.RED in types
    patient.has_yellow_alert = AlertType.YELLOW in types
    return patient


def evaluate_alerts(repo, assessment: Assessment) -> List[Alert]:
    """
    Persist alerts derived from an assessment and refresh the patient's flags.
    Categories the patient already has an alert for are skipped.
    Returns the list of newly created Alert objects.
    """
    patient = repo.get_patient(assessment.patient_id)
    if not patient:
        return []

    existing = {a.category for a in repo.alerts(patient.id)}
    new_alerts: List[Alert] = []
    for alert_type, category, description in alerts_for_assessment(assessment):
        if category in existing:
            continue
        alert = repo.create_alert(
            patient_id=patient.id,
            type=alert_type,
            category=category,
            description=description,
        )
        new_alerts.append(alert)
        if alert_type == AlertType.RED:
            logger.warning("Red alert %r created for patient %s", category, patient.id)
        else:
            logger.info("Alert %r created for patient %s", category, patient.id)

    refresh_alert_flags(patient, repo.alerts(patient.id))
    patient.last_call_date = assessment.date
    repo.save(patient)
    return new_alerts
