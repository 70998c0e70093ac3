"""Projections of clinic records into export rows with pt-BR column labels.

Every projection emits every column for every input, using ``""`` when the
source field is absent, so all rows of one export share the same header.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from clinic.constants import (
    APPOINTMENT_STATUS_LABELS,
    ENTRY_TYPE_LABELS,
    PAYMENT_METHOD_LABELS,
)
from clinic.services._helpers import parse_iso_date
from db.models import Appointments, FinancialEntries, Patients

CENTS = Decimal("0.01")


# -- Formatting helpers ----------------------------------------------------


def format_date_br(raw: str | None) -> str:
    """ISO date or datetime string -> ``dd/mm/yyyy``. Unparseable values pass through."""
    try:
        day: date | None = parse_iso_date(raw)
    except ValueError:
        return raw or ""
    return day.strftime("%d/%m/%Y") if day else ""


def format_brl(value: float | Decimal | None) -> str:
    """``1234.5`` -> ``R$ 1.234,50``."""
    amount: Decimal = Decimal(str(value or 0)).quantize(CENTS, rounding=ROUND_HALF_UP)
    digits: str = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    sign: str = "-" if amount < 0 else ""
    return f"{sign}R$ {digits}"


def format_amount(value: float | Decimal | None) -> str:
    """Fixed two-decimal amount, ``R$ 150.00``."""
    amount: Decimal = Decimal(str(value or 0)).quantize(CENTS, rounding=ROUND_HALF_UP)
    return f"R$ {amount}"


def format_bool(value: bool | None) -> str:
    return "Sim" if value else "Não"


def format_address(patient: Patients) -> str:
    """Single-line address; empty parts are skipped."""
    street: str = ", ".join(p for p in (patient.street, patient.number) if p)
    if patient.complement:
        street = f"{street} {patient.complement}".strip()
    city: str = "/".join(p for p in (patient.city, patient.state) if p)
    locality: str = ", ".join(p for p in (patient.district, city) if p)
    line: str = " - ".join(p for p in (street, locality) if p)
    if patient.zip_code:
        line = f"{line} {patient.zip_code}".strip()
    return line


def appointment_status_label(status: str | None) -> str:
    if not status:
        return ""
    return APPOINTMENT_STATUS_LABELS.get(status, status)


def entry_type_label(entry_type: str | None) -> str:
    return ENTRY_TYPE_LABELS.get(entry_type or "", entry_type or "")


def payment_method_label(method: str | None) -> str:
    if not method:
        return "-"
    return PAYMENT_METHOD_LABELS.get(method, method)


# -- Projections -----------------------------------------------------------


def project_patient(patient: Patients) -> dict[str, str]:
    return {
        "Nome": patient.name or "",
        "Email": patient.email or "",
        "Telefone": patient.phone or "",
        "CPF": patient.cpf or "",
        "Data de Nascimento": patient.birth_date or "",
        "Data de Cadastro": format_date_br(patient.created_at),
        "Endereço": format_address(patient),
        "Observações": patient.notes or "",
    }


def project_appointment(appointment: Appointments) -> dict[str, str]:
    patient: Patients | None = appointment.patient
    return {
        "Nome do Paciente": patient.name if patient is not None else "",
        "Nome do Médico": appointment.doctor_name or "",
        "Data": appointment.date or "",
        "Hora": appointment.time or "",
        "Status": appointment_status_label(appointment.status),
        "Observações": appointment.notes or "",
    }


def project_financial_entry(entry: FinancialEntries) -> dict[str, str]:
    return {
        "Descrição": entry.description or "",
        "Valor": format_amount(entry.amount),
        "Tipo": entry_type_label(entry.type),
        "Categoria": entry.category or "",
        "Data": entry.date or "",
        "Observações": entry.notes or "",
    }


def project_cash_flow_entry(entry: FinancialEntries) -> dict[str, str]:
    """Row of the financial page's cash-flow download."""
    return {
        "Data": format_date_br(entry.date),
        "Tipo": entry_type_label(entry.type),
        "Categoria": entry.category or "",
        "Descrição": entry.description or "",
        "Valor": format_brl(entry.amount),
        "Método de Pagamento": payment_method_label(entry.payment_method),
        "Recorrente": format_bool(entry.is_recurring),
    }
