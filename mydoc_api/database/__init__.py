# Database Package - Centralized imports
# Allows easy importing of models, connection utilities and the repository

from .connection import (
    engine,
    Base,
    SessionLocal,
    get_db,
    init_db,
)

from .models import (
    # Hospital & Doctor Models
    Hospital,
    Doctor,
    Review,

    # Patient & Appointment Models
    Patient,
    Appointment,

    # Billing Models
    Medication,
    Bill,
    Payment,

    # Prescription & History Models
    Prescription,
    MedicationDosage,
    History,
    MedicationDosageHistory,
)

from .repository import Repository, repository_for

__all__ = [
    # Connection
    "engine",
    "Base",
    "SessionLocal",
    "get_db",
    "init_db",

    # Hospital & Doctor
    "Hospital",
    "Doctor",
    "Review",

    # Patient & Appointment
    "Patient",
    "Appointment",

    # Billing
    "Medication",
    "Bill",
    "Payment",

    # Prescription & History
    "Prescription",
    "MedicationDosage",
    "History",
    "MedicationDosageHistory",

    # Repository
    "Repository",
    "repository_for",
]
