"""MyDocAppointment API - REST backend for hospitals, doctors, patients and billing."""

__version__ = "1.0.0"
