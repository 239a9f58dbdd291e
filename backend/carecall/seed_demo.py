"""
Demo data seeder for CareCall.

Creates a demo clinician and a demo family member with known credentials,
three patients, and one fully assessed check-in call for the first patient
so the dashboard and the family portal work immediately after a fresh start.

Credentials (printed to stdout on first run):
  Clinician: drchen  / password123
  Family   : marydoe / familypass  (linked to John Doe)

This seeder is idempotent - it is safe to call on every startup.
"""
from datetime import datetime, timedelta

from .models.base import SessionLocal, Base, engine
from .models.call import RiskLevel
from .models.user import User, UserRole
from .models.patient import Patient
from .models.alert import AlertType
from .core.security import get_password_hash
from .services.alert_engine import evaluate_alerts
from .services.repository import MonitoringRepository

DEMO_CLINICIAN_USERNAME = "drchen"
DEMO_CLINICIAN_PASSWORD = "password123"

DEMO_FAMILY_USERNAME = "marydoe"
DEMO_FAMILY_PASSWORD = "familypass"

DEMO_PATIENTS = [
    {
        "name": "John Doe",
        "initials": "JD",
        "mrn": "432765",
        "age": 78,
        "gender": "Male",
        "phone": "(555) 123-4567",
        "address": "123 Main St, Anytown, USA",
        "emergency_contact": "Mary Doe (555) 987-6543",
        "last_call_date": "Apr 18, 2023",
    },
    {
        "name": "Margaret Smith",
        "initials": "MS",
        "mrn": "432766",
        "age": 82,
        "gender": "Female",
        "phone": "(555) 234-5678",
        "address": "456 Oak Ave, Anytown, USA",
        "emergency_contact": "Thomas Smith (555) 876-5432",
        "has_yellow_alert": True,
        "last_call_date": "Apr 17, 2023",
    },
    {
        "name": "Robert Johnson",
        "initials": "RJ",
        "mrn": "432767",
        "age": 75,
        "gender": "Male",
        "phone": "(555) 345-6789",
        "address": "789 Pine St, Anytown, USA",
        "emergency_contact": "Linda Johnson (555) 765-4321",
        "last_call_date": "Apr 12, 2023",
    },
]

AI_SPEAKER = {"speaker": "AI", "speaker_name": "CareCall AI"}
PATIENT_SPEAKER = {"speaker": "Patient", "speaker_name": "John Doe"}

DEMO_TRANSCRIPT = [
    (AI_SPEAKER, "Good morning, John. This is CareCall checking in. How are you feeling today?", None),
    (PATIENT_SPEAKER, "I'm not doing so well today. My breathing feels a bit difficult, especially when I try to walk to the kitchen.", None),
    (AI_SPEAKER, "I'm sorry to hear that, John. Let me ask you a few questions about your activities. Have you been able to get dressed by yourself today?", None),
    (PATIENT_SPEAKER, "Yes, I managed to get dressed, but it took me longer than usual. I felt a bit dizzy when I bent down to put on my socks.", "yellow"),
    (AI_SPEAKER, "Thank you for letting me know. What about preparing meals? Have you been able to make any food for yourself today?", None),
    (PATIENT_SPEAKER, "I haven't eaten yet today. I don't feel like cooking and it's hard to stand for that long. I might just have some crackers later.", "red"),
    (AI_SPEAKER, "I understand. Let's talk about your medications. Did you take all your prescribed medications this morning?", None),
    (PATIENT_SPEAKER, "I took my heart pill, but I'm not sure about the water pill. I might have forgotten that one. There are so many to keep track of.", "yellow"),
    (AI_SPEAKER, "The water pill is important for managing fluid in your body. Have you noticed any swelling in your ankles or feet?", None),
    (PATIENT_SPEAKER, "Yes, my ankles are quite swollen today, more than usual. And my shoes feel tight. Is that bad?", "red"),
]

DEMO_FINDINGS = [
    ("Patient reports difficulty breathing and increased fatigue, suggesting possible cardiac decompensation", RiskLevel.HIGH),
    ("Significant ankle swelling noted, along with missed diuretic dose", RiskLevel.HIGH),
    ("Experiencing dizziness when changing positions, possible orthostatic hypotension", RiskLevel.MODERATE),
    ("Decreased nutritional intake, hasn't eaten today", RiskLevel.MODERATE),
    ("Medication adherence issues, specifically with diuretic", RiskLevel.MODERATE),
]

DEMO_TRENDS = [
    (0, "Today - Apr 18, 2023", "Reports breathing difficulties, ankle swelling, missed medication, and poor nutrition.", RiskLevel.HIGH),
    (7, "Apr 11, 2023", "Reported occasional shortness of breath when climbing stairs and some medication confusion.", RiskLevel.MODERATE),
    (14, "Apr 4, 2023", "Reported feeling well, with good medication adherence and regular meals. No concerning symptoms.", RiskLevel.LOW),
]

DEMO_ACTIONS = [
    ("Immediate Attention Required", [
        "Schedule urgent telehealth or in-person visit to assess cardiac status",
        "Verify medication adherence, especially diuretic dosing",
        "Assess for fluid overload and potential heart failure exacerbation",
    ]),
    ("Follow-up Recommendations", [
        "Increase CareCall frequency to daily for next 7 days",
        "Arrange home health visit to assist with medication management",
        "Consider meal delivery service to improve nutritional intake",
    ]),
]

DEMO_ALERTS = [
    (AlertType.RED, "Frailty: High Risk", "Patient shows significant frailty indicators requiring immediate attention"),
    (AlertType.YELLOW, "Medication Adherence: Moderate Risk", "Patient reports inconsistent medication usage, particularly diuretics"),
    (AlertType.YELLOW, "ADL: Moderate Risk", "Patient shows increasing difficulty with activities of daily living"),
]


def seed_demo_data() -> None:
    """Create demo users, patients and the first patient's check-in call if missing."""
    # Ensure tables exist (no-op when already created at startup)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        repo = MonitoringRepository(db)
        clinician = _seed_clinician(repo)
        patients = _seed_patients(repo, clinician.id)
        _seed_family(repo, patients[0].id)
        _seed_call(repo, patients[0].id)
    finally:
        db.close()


# ── helpers ──────────────────────────────────────────────────────────────────

def _seed_clinician(repo: MonitoringRepository) -> User:
    clinician = repo.get_user_by_username(DEMO_CLINICIAN_USERNAME)
    if not clinician:
        clinician = repo.create_user(
            username=DEMO_CLINICIAN_USERNAME,
            hashed_password=get_password_hash(DEMO_CLINICIAN_PASSWORD),
            full_name="Dr. Sarah Chen",
            role=UserRole.CLINICIAN,
            hospital="Memorial Hospital",
        )
        print(f"[seed] Created demo clinician: {DEMO_CLINICIAN_USERNAME} / {DEMO_CLINICIAN_PASSWORD}")
    return clinician


def _seed_patients(repo: MonitoringRepository, doctor_id: int) -> list:
    patients = []
    for fields in DEMO_PATIENTS:
        patient = repo.get_patient_by_mrn(fields["mrn"])
        if not patient:
            patient = repo.create_patient(primary_doctor_id=doctor_id, **fields)
            print(f"[seed] Created demo patient  : {patient.name} (MRN: {patient.mrn})")
        patients.append(patient)
    return patients


def _seed_family(repo: MonitoringRepository, patient_id: int) -> User:
    family = repo.get_user_by_username(DEMO_FAMILY_USERNAME)
    if not family:
        family = repo.create_user(
            username=DEMO_FAMILY_USERNAME,
            hashed_password=get_password_hash(DEMO_FAMILY_PASSWORD),
            full_name="Mary Doe",
            role=UserRole.FAMILY,
            related_patient_id=patient_id,
            contact_phone="(555) 987-6543",
            contact_email="mary.doe@example.com",
            relationship="daughter",
        )
        print(f"[seed] Created demo family   : {DEMO_FAMILY_USERNAME} / {DEMO_FAMILY_PASSWORD}")
    return family


def _seed_call(repo: MonitoringRepository, patient_id: int) -> None:
    if repo.latest_call(patient_id):
        return

    transcript = [
        dict(speaker, id=i, text=text, **({"highlight_type": highlight} if highlight else {}))
        for i, (speaker, text, highlight) in enumerate(DEMO_TRANSCRIPT, start=1)
    ]
    call = repo.create_call(
        patient_id=patient_id,
        date="April 18, 2023",
        time="10:23 AM",
        duration_seconds=615,
        audio_url="",
        transcript=transcript,
    )

    assessment = repo.create_assessment(
        call_id=call.id,
        patient_id=patient_id,
        date="April 18, 2023",
        frailty_score=80,
        frailty_risk=RiskLevel.HIGH,
        adl_score=60,
        adl_risk=RiskLevel.MODERATE,
        iadl_score=70,
        iadl_risk=RiskLevel.HIGH,
        medication_adherence_score=50,
        medication_adherence_risk=RiskLevel.MODERATE,
        cardiac_risk_factors_score=75,
        cardiac_risk_factors_risk=RiskLevel.HIGH,
    )

    for text, risk in DEMO_FINDINGS:
        repo.create_finding(call_id=call.id, patient_id=patient_id, text=text, risk=risk)

    now = datetime.utcnow()
    for days_ago, date, summary, risk in DEMO_TRENDS:
        repo.create_health_trend(
            patient_id=patient_id,
            date=date,
            summary=summary,
            risk=risk,
            created_at=now - timedelta(days=days_ago),
        )

    for category, actions in DEMO_ACTIONS:
        repo.create_recommended_action(patient_id=patient_id, category=category, actions=actions)

    for alert_type, category, description in DEMO_ALERTS:
        repo.create_alert(patient_id=patient_id, type=alert_type, category=category, description=description)

    # Fills in alerts for the remaining risky domains and sets the patient's flags
    evaluate_alerts(repo, assessment)
    print(f"[seed] Created demo call     : {call.date} {call.time} (id: {call.id})")
