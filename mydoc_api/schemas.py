"""Transfer objects returned by the API.

Request bodies that belong to a single router live next to it in
``mydoc_api.api``; the models here are shared between routers and the
command/query handlers.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class OrmModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ==================== HOSPITALS & DOCTORS ====================

class HospitalDto(OrmModel):
    id: UUID
    name: str
    address: str
    phone: str


class DoctorDto(OrmModel):
    id: UUID
    first_name: str
    last_name: str
    specialization: str
    email: str
    phone: str
    title: str
    profession: str
    location: str
    hospital_id: Optional[UUID] = None


class ReviewDto(OrmModel):
    id: UUID
    doctor_id: UUID
    text: str
    rating: int


# ==================== PATIENTS & APPOINTMENTS ====================

class PatientDto(OrmModel):
    id: UUID
    first_name: str
    last_name: str
    email: str
    phone: str
    gender: Optional[str] = None
    age: Optional[int] = None


class AppointmentDto(OrmModel):
    id: UUID
    doctor_id: UUID
    patient_id: UUID
    start_time: datetime
    end_time: datetime
    description: Optional[str] = None


# ==================== BILLING ====================

class MedicationDto(OrmModel):
    id: UUID
    name: str
    unit: str
    stock: int


class PaymentDto(OrmModel):
    id: UUID
    bill_id: UUID
    amount: Decimal
    method: str
    paid_at: Optional[datetime] = None


class BillDto(OrmModel):
    id: UUID
    description: Optional[str] = None
    medications: List[MedicationDto] = []
    payment: Optional[PaymentDto] = None


# ==================== PRESCRIPTIONS & HISTORIES ====================

class MedicationDosageDto(OrmModel):
    id: UUID
    medication_id: UUID
    dosage: str
    quantity: int


class PrescriptionDto(OrmModel):
    id: UUID
    description: Optional[str] = None
    medication_dosages: List[MedicationDosageDto] = []


class MedicationDosageHistoryDto(OrmModel):
    id: UUID
    medication_id: UUID
    dosage: str
    quantity: int


class HistoryDto(OrmModel):
    id: UUID
    patient_id: UUID
    description: Optional[str] = None
    medication_dosage_histories: List[MedicationDosageHistoryDto] = []
