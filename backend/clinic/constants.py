"""Static lookup tables shared by the dashboard and the exports."""

from db.enums import AppointmentStatus

APPOINTMENT_STATUS_LABELS: dict[str, str] = {
    AppointmentStatus.SCHEDULED.value: "Agendado",
    AppointmentStatus.CONFIRMED.value: "Confirmado",
    AppointmentStatus.WAITING.value: "Aguardando",
    AppointmentStatus.IN_PROGRESS.value: "Em Andamento",
    AppointmentStatus.COMPLETED.value: "Finalizado",
    AppointmentStatus.CANCELLED.value: "Cancelado",
    AppointmentStatus.NO_SHOW.value: "Não Compareceu",
}

FINANCIAL_CATEGORIES: dict[str, dict[str, str]] = {
    "revenue": {
        "consultation": "Consultas",
        "procedures": "Procedimentos",
        "exams": "Exames",
        "other": "Outras Receitas",
    },
    "expense": {
        "salary": "Salários",
        "rent": "Aluguel",
        "equipment": "Equipamentos",
        "supplies": "Materiais",
        "marketing": "Marketing",
        "other": "Outras Despesas",
    },
}

ENTRY_TYPE_LABELS: dict[str, str] = {
    "income": "Receita",
    "expense": "Despesa",
}

PAYMENT_METHOD_LABELS: dict[str, str] = {
    "cash": "Dinheiro",
    "card": "Cartão",
    "pix": "PIX",
    "insurance": "Convênio",
    "bank_transfer": "Transferência",
}

WORKING_HOURS: dict[str, str] = {
    "start": "08:00",
    "end": "18:00",
    "lunch_start": "12:00",
    "lunch_end": "14:00",
}

APPOINTMENT_DURATION_MINUTES = 30

PAGINATION: dict[str, object] = {
    "default_page_size": 10,
    "page_size_options": (5, 10, 20, 50),
}

# 8 working hours, 5 slots per hour
DAILY_APPOINTMENT_SLOTS = 40
