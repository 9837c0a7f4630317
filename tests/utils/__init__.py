"""Test utilities shared across the API tests."""

from tests.utils.factories import (
    doctor_payload,
    hospital_payload,
    patient_payload,
)

__all__ = ["doctor_payload", "hospital_payload", "patient_payload"]
