"""
MyDocAppointment - Database Models
Entities for hospitals, doctors, patients, appointments, bills,
medications, payments, prescriptions and medical histories.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text, DECIMAL, Table, Uuid
from sqlalchemy.orm import relationship

from .connection import Base
from ..exceptions import (
    BillAlreadyPaidError,
    DomainRuleError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)


class RequiredFieldsMixin:
    """Entities listing the scalar fields that must be present and non-blank."""

    REQUIRED_FIELDS = ()

    def validate_required(self):
        label = self.__class__.__name__.lower()
        for name in self.REQUIRED_FIELDS:
            value = getattr(self, name, None)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(f"The field '{name}' in {label} must not be empty")

    def copy_fields(self, fields: dict, allowed):
        for name, value in fields.items():
            if name in allowed and value is not None:
                setattr(self, name, value)


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _ensure_free_slot(appointments, appointment, owner: str):
    for existing in appointments:
        if existing is appointment:
            continue
        if existing.start_time < appointment.end_time and appointment.start_time < existing.end_time:
            raise DomainRuleError(
                f"{owner} already has an appointment between "
                f"{existing.start_time.isoformat()} and {existing.end_time.isoformat()}"
            )


# ============================================
# HOSPITALS & DOCTORS
# ============================================

class Hospital(RequiredFieldsMixin, Base):
    __tablename__ = "hospitals"

    REQUIRED_FIELDS = ("name", "address", "phone")

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    address = Column(Text, nullable=False)
    phone = Column(String(30), nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    # Relationships
    doctors = relationship("Doctor", back_populates="hospital", cascade="all, delete")

    def add_doctors(self, doctors):
        """Attach a batch of doctors; one invalid doctor rejects the whole batch."""
        if not doctors:
            raise ValidationError("At least one doctor must be provided")
        for doctor in doctors:
            doctor.validate_required()
        self.doctors.extend(doctors)


class Doctor(RequiredFieldsMixin, Base):
    __tablename__ = "doctors"

    REQUIRED_FIELDS = (
        "first_name", "last_name", "specialization", "email",
        "phone", "title", "profession", "location",
    )
    UPDATABLE_FIELDS = REQUIRED_FIELDS

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    hospital_id = Column(Uuid, ForeignKey("hospitals.id"), nullable=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    specialization = Column(String(100), nullable=False)
    email = Column(String(100), nullable=False)
    phone = Column(String(30), nullable=False)
    title = Column(String(50), nullable=False)
    profession = Column(String(100), nullable=False)
    location = Column(String(200), nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    # Relationships
    hospital = relationship("Hospital", back_populates="doctors")
    appointments = relationship("Appointment", back_populates="doctor", cascade="all, delete")
    reviews = relationship("Review", back_populates="doctor", cascade="all, delete-orphan")

    def add_appointment(self, appointment):
        _ensure_free_slot(self.appointments, appointment, "Doctor")
        self.appointments.append(appointment)

    def add_review(self, text: str, rating: int):
        if not text or not text.strip():
            raise ValidationError("Review text must not be empty")
        if rating is None or not 1 <= rating <= 5:
            raise ValidationError("Review rating must be between 1 and 5")
        review = Review(text=text, rating=rating)
        self.reviews.append(review)
        return review

    def update_doctor(self, **fields):
        self.copy_fields(fields, self.UPDATABLE_FIELDS)
        self.validate_required()


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    doctor_id = Column(Uuid, ForeignKey("doctors.id"), nullable=False)
    text = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    doctor = relationship("Doctor", back_populates="reviews")


# ============================================
# PATIENTS & APPOINTMENTS
# ============================================

class Patient(RequiredFieldsMixin, Base):
    __tablename__ = "patients"

    REQUIRED_FIELDS = ("first_name", "last_name", "email", "phone")

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(100), nullable=False)
    phone = Column(String(30), nullable=False)
    gender = Column(String(10))
    age = Column(Integer)
    created_at = Column(DateTime, default=datetime.now)

    # Relationships
    appointments = relationship("Appointment", back_populates="patient", cascade="all, delete")
    histories = relationship("History", back_populates="patient", cascade="all, delete")

    def add_appointment(self, appointment):
        _ensure_free_slot(self.appointments, appointment, "Patient")
        self.appointments.append(appointment)


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    doctor_id = Column(Uuid, ForeignKey("doctors.id"), nullable=False)
    patient_id = Column(Uuid, ForeignKey("patients.id"), nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    description = Column(Text)
    created_at = Column(DateTime, default=datetime.now)

    # Relationships
    doctor = relationship("Doctor", back_populates="appointments")
    patient = relationship("Patient", back_populates="appointments")

    def validate_schedule(self):
        if self.start_time is None or self.end_time is None:
            raise ValidationError("An appointment needs a start time and an end time")
        self.start_time = _naive_utc(self.start_time)
        self.end_time = _naive_utc(self.end_time)
        if self.end_time <= self.start_time:
            raise ValidationError("An appointment must end after it starts")


# ============================================
# MEDICATIONS, BILLS & PAYMENTS
# ============================================

bill_medications = Table(
    "bill_medications",
    Base.metadata,
    Column("bill_id", Uuid, ForeignKey("bills.id", ondelete="CASCADE"), primary_key=True),
    Column("medication_id", Uuid, ForeignKey("medications.id", ondelete="CASCADE"), primary_key=True),
)


class Medication(RequiredFieldsMixin, Base):
    __tablename__ = "medications"

    REQUIRED_FIELDS = ("name", "unit")
    UPDATABLE_FIELDS = ("name", "unit", "stock")

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    unit = Column(String(50), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.now)

    # Relationships
    bills = relationship("Bill", secondary=bill_medications, back_populates="medications")
    prescription_dosages = relationship("MedicationDosage", back_populates="medication", cascade="all, delete")
    history_dosages = relationship("MedicationDosageHistory", back_populates="medication", cascade="all, delete")

    def update_stock(self, quantity: int = 1):
        """Take ``quantity`` units out of stock."""
        current = self.stock or 0
        if current < quantity:
            raise InsufficientStockError(f"Medication {self.name} does not have enough stock.")
        self.stock = current - quantity

    def update_medication(self, **fields):
        stock = fields.get("stock")
        if stock is not None and stock < 0:
            raise ValidationError("Medication stock must not be negative")
        self.copy_fields(fields, self.UPDATABLE_FIELDS)
        self.validate_required()


class Bill(Base):
    __tablename__ = "bills"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    description = Column(Text)
    created_at = Column(DateTime, default=datetime.now)

    # Relationships
    medications = relationship("Medication", secondary=bill_medications, back_populates="bills")
    payment = relationship("Payment", back_populates="bill", uselist=False, cascade="all, delete-orphan")

    def add_medications(self, medications):
        for medication in medications:
            if medication not in self.medications:
                self.medications.append(medication)

    def remove_medication(self, medication):
        if medication not in self.medications:
            raise NotFoundError("Medication is not on this bill")
        self.medications.remove(medication)

    def ensure_stock_available(self):
        """Every line item needs at least one unit before the bill can be paid."""
        for medication in self.medications:
            if (medication.stock or 0) < 1:
                raise InsufficientStockError(f"Medication {medication.name} does not have enough stock.")

    def ensure_unpaid(self):
        if self.payment is not None:
            raise BillAlreadyPaidError("The bill already has a payment.")

    def add_payment_to_bill(self, payment):
        self.ensure_unpaid()
        payment.add_bill_to_payment(self)
        self.payment = payment


class Payment(RequiredFieldsMixin, Base):
    __tablename__ = "payments"

    REQUIRED_FIELDS = ("method",)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    bill_id = Column(Uuid, ForeignKey("bills.id"), unique=True, nullable=False)
    amount = Column(DECIMAL(10, 2), nullable=False)
    method = Column(String(50), nullable=False)  # cash, card, insurance
    paid_at = Column(DateTime, default=datetime.now)

    bill = relationship("Bill", back_populates="payment")

    def add_bill_to_payment(self, bill):
        self.bill = bill


# ============================================
# PRESCRIPTIONS & HISTORIES
# ============================================

class Prescription(Base):
    __tablename__ = "prescriptions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    description = Column(Text)
    created_at = Column(DateTime, default=datetime.now)

    medication_dosages = relationship(
        "MedicationDosage", back_populates="prescription", cascade="all, delete-orphan"
    )


class MedicationDosage(Base):
    __tablename__ = "medication_dosages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    prescription_id = Column(Uuid, ForeignKey("prescriptions.id"), nullable=False)
    medication_id = Column(Uuid, ForeignKey("medications.id"), nullable=False)
    dosage = Column(String(100), nullable=False)  # e.g. "500mg twice a day"
    quantity = Column(Integer, nullable=False, default=1)

    prescription = relationship("Prescription", back_populates="medication_dosages")
    medication = relationship("Medication", back_populates="prescription_dosages")


class History(Base):
    __tablename__ = "histories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    patient_id = Column(Uuid, ForeignKey("patients.id"), nullable=False)
    description = Column(Text)
    created_at = Column(DateTime, default=datetime.now)

    patient = relationship("Patient", back_populates="histories")
    medication_dosage_histories = relationship(
        "MedicationDosageHistory", back_populates="history", cascade="all, delete-orphan"
    )

    def add_patient_to_history(self, patient):
        self.patient = patient


class MedicationDosageHistory(Base):
    __tablename__ = "medication_dosage_histories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    history_id = Column(Uuid, ForeignKey("histories.id"), nullable=False)
    medication_id = Column(Uuid, ForeignKey("medications.id"), nullable=False)
    dosage = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    history = relationship("History", back_populates="medication_dosage_histories")
    medication = relationship("Medication", back_populates="history_dosages")
