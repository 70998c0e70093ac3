"""Sample clinic data for local testing.

Idempotent: skips seeding if patients already exist.
"""

from datetime import UTC, date, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from clinic.constants import FINANCIAL_CATEGORIES
from db.enums import AppointmentType, RecurringFrequency
from db.models import Appointments, FinancialEntries, Patients, generate_uuid


def _ts(days_ago: int = 0) -> str:
    return (datetime.now(UTC) - timedelta(days=days_ago)).isoformat()


PATIENTS = [
    {
        "name": "João Pedro Silva",
        "email": "joao.pedro@email.com",
        "phone": "(11) 99876-5432",
        "cpf": "123.456.789-01",
        "birth_date": "1990-05-20",
        "street": "Rua das Flores",
        "number": "123",
        "complement": "Apto 45",
        "district": "Centro",
        "city": "São Paulo",
        "state": "SP",
        "zip_code": "01234-567",
        "medical_history": "Saudável",
        "emergency_contact_name": "Maria Silva",
        "emergency_contact_phone": "(11) 99999-8888",
        "emergency_contact_relationship": "Mãe",
    },
    {
        "name": "Ana Silva Santos",
        "email": "ana.silva@email.com",
        "phone": "(11) 98765-4321",
        "cpf": "987.654.321-09",
        "birth_date": "1985-03-15",
        "street": "Rua das Rosas",
        "number": "456",
        "complement": "Casa",
        "district": "Jardim",
        "city": "São Paulo",
        "state": "SP",
        "zip_code": "01234-890",
        "medical_history": "Hipertensão controlada",
        "allergies": "Dipirona",
        "medications": "Losartana 50mg",
        "notes": 'Prefere atendimento pela manhã, "sem jejum"',
    },
    {
        "name": "Carlos Eduardo Lima",
        "email": "carlos.lima@email.com",
        "phone": "(11) 97654-3210",
        "cpf": "321.654.987-00",
        "birth_date": "1978-07-22",
        "street": "Av. Paulista",
        "number": "1000",
        "district": "Bela Vista",
        "city": "São Paulo",
        "state": "SP",
        "zip_code": "01310-100",
        "medical_history": "Diabetes tipo 2",
        "medications": "Metformina 850mg",
    },
]

# (patient index, doctor id, doctor name, time, duration, status, price, paid, method, notes)
APPOINTMENTS = [
    (0, "dr1", "Dr. João Cardiologista", "09:00", 60, "confirmed", 250.0, False, None,
     "Consulta agendada para João Pedro"),
    (1, "dr2", "Dra. Maria Endocrinologista", "10:00", 45, "in-progress", 280.0, True, "card",
     "Acompanhamento, retorno em 30 dias"),
    (2, "dr3", "Dr. Pedro Pneumologista", "08:45", 30, "completed", 200.0, True, "pix",
     "Consulta finalizada - paciente estável"),
    (2, "dr1", "Dr. João Cardiologista", "14:00", 30, "cancelled", 250.0, False, None, None),
]

_REVENUE = FINANCIAL_CATEGORIES["revenue"]
_EXPENSE = FINANCIAL_CATEGORIES["expense"]

# (type, category, description, amount, days before today, method, recurring)
FINANCIAL_ENTRIES = [
    ("income", _REVENUE["consultation"], "Consulta - Dra. Maria", 280.0, 0, "card", False),
    ("income", _REVENUE["consultation"], "Consulta - Dr. Pedro", 200.0, 0, "pix", False),
    ("expense", _EXPENSE["rent"], "Aluguel do consultório", 3500.0, 1, "bank_transfer", True),
    ("expense", _EXPENSE["supplies"], "Seringas, luvas e materiais descartáveis", 450.0, 2, "card",
     False),
]


def seed(session: Session, today: date | None = None) -> int:
    """Insert sample rows; returns how many rows were created."""
    existing = session.scalars(select(Patients).limit(1)).first()
    if existing:
        return 0

    day: date = today or date.today()
    created: int = 0

    patients: list[Patients] = []
    for data in PATIENTS:
        patient = Patients(id=generate_uuid(), created_at=_ts(30), updated_at=_ts(30), **data)
        session.add(patient)
        patients.append(patient)
        created += 1
    session.flush()

    for idx, doctor_id, doctor, time, duration, status, price, paid, method, notes in APPOINTMENTS:
        session.add(
            Appointments(
                id=generate_uuid(),
                patient_id=patients[idx].id,
                doctor_id=doctor_id,
                doctor_name=doctor,
                date=day.isoformat(),
                time=time,
                duration=duration,
                type=AppointmentType.CONSULTATION.value,
                status=status,
                notes=notes,
                price=price,
                paid=paid,
                payment_method=method,
                created_at=_ts(1),
                updated_at=_ts(),
            )
        )
        created += 1

    for entry_type, category, description, amount, days_ago, method, recurring in FINANCIAL_ENTRIES:
        session.add(
            FinancialEntries(
                id=generate_uuid(),
                type=entry_type,
                category=category,
                description=description,
                amount=amount,
                date=(day - timedelta(days=days_ago)).isoformat(),
                payment_method=method,
                is_recurring=recurring,
                recurring_frequency=RecurringFrequency.MONTHLY.value if recurring else None,
                recurring_interval=1 if recurring else None,
                created_at=_ts(days_ago),
                updated_at=_ts(days_ago),
            )
        )
        created += 1

    session.flush()
    return created
