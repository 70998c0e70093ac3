"""SQLAlchemy ORM models for patients, appointments and financial entries."""

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import ForeignKey, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from clinic.constants import APPOINTMENT_DURATION_MINUTES
from db.enums import AppointmentStatus, AppointmentType

convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=convention)


def generate_uuid() -> str:
    return str(uuid4())


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


class Patients(Base):
    __tablename__ = "patients"

    id: Mapped[str] = mapped_column(primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(nullable=False)
    email: Mapped[str] = mapped_column(nullable=False, default="")
    phone: Mapped[str] = mapped_column(nullable=False, default="")
    cpf: Mapped[str] = mapped_column(nullable=False, default="")
    birth_date: Mapped[str | None] = mapped_column()
    street: Mapped[str | None] = mapped_column()
    number: Mapped[str | None] = mapped_column()
    complement: Mapped[str | None] = mapped_column()
    district: Mapped[str | None] = mapped_column()
    city: Mapped[str | None] = mapped_column()
    state: Mapped[str | None] = mapped_column()
    zip_code: Mapped[str | None] = mapped_column()
    medical_history: Mapped[str] = mapped_column(nullable=False, default="")
    allergies: Mapped[str | None] = mapped_column()
    medications: Mapped[str | None] = mapped_column()
    emergency_contact_name: Mapped[str | None] = mapped_column()
    emergency_contact_phone: Mapped[str | None] = mapped_column()
    emergency_contact_relationship: Mapped[str | None] = mapped_column()
    notes: Mapped[str | None] = mapped_column()
    created_at: Mapped[str] = mapped_column(nullable=False, default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(
        nullable=False, default=utc_now_iso, onupdate=utc_now_iso
    )

    appointments = relationship(
        "Appointments",
        back_populates="patient",
        order_by="Appointments.date",
    )


class Appointments(Base):
    __tablename__ = "appointments"

    id: Mapped[str] = mapped_column(primary_key=True, default=generate_uuid)
    patient_id: Mapped[str] = mapped_column(
        ForeignKey("patients.id", ondelete="CASCADE"), nullable=False
    )
    doctor_id: Mapped[str] = mapped_column(nullable=False)
    doctor_name: Mapped[str] = mapped_column(nullable=False)
    date: Mapped[str] = mapped_column(nullable=False)
    time: Mapped[str] = mapped_column(nullable=False)
    duration: Mapped[int] = mapped_column(nullable=False, default=APPOINTMENT_DURATION_MINUTES)
    type: Mapped[str] = mapped_column(nullable=False, default=AppointmentType.CONSULTATION.value)
    status: Mapped[str] = mapped_column(nullable=False, default=AppointmentStatus.SCHEDULED.value)
    notes: Mapped[str | None] = mapped_column()
    price: Mapped[float] = mapped_column(nullable=False, default=0.0)
    paid: Mapped[bool] = mapped_column(nullable=False, default=False)
    payment_method: Mapped[str | None] = mapped_column()
    created_at: Mapped[str] = mapped_column(nullable=False, default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(
        nullable=False, default=utc_now_iso, onupdate=utc_now_iso
    )

    patient = relationship("Patients", back_populates="appointments")


class FinancialEntries(Base):
    __tablename__ = "financial_entries"

    id: Mapped[str] = mapped_column(primary_key=True, default=generate_uuid)
    type: Mapped[str] = mapped_column(nullable=False)
    category: Mapped[str] = mapped_column(nullable=False)
    description: Mapped[str] = mapped_column(nullable=False)
    amount: Mapped[float] = mapped_column(nullable=False)
    date: Mapped[str] = mapped_column(nullable=False)
    payment_method: Mapped[str | None] = mapped_column()
    is_recurring: Mapped[bool] = mapped_column(nullable=False, default=False)
    recurring_frequency: Mapped[str | None] = mapped_column()
    recurring_interval: Mapped[int | None] = mapped_column()
    recurring_end_date: Mapped[str | None] = mapped_column()
    appointment_id: Mapped[str | None] = mapped_column(
        ForeignKey("appointments.id", ondelete="SET NULL")
    )
    notes: Mapped[str | None] = mapped_column()
    created_at: Mapped[str] = mapped_column(nullable=False, default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(
        nullable=False, default=utc_now_iso, onupdate=utc_now_iso
    )
