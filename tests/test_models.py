"""Unit tests for the entity mutators, run on transient objects."""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from mydoc_api.database import Appointment, Bill, Doctor, Hospital, Medication, Patient, Payment
from mydoc_api.exceptions import (
    BillAlreadyPaidError,
    ConflictError,
    DomainRuleError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from tests.utils import doctor_payload


START = datetime(2026, 11, 2, 9, 0)


def slot(start_minutes, end_minutes):
    return Appointment(
        start_time=START + timedelta(minutes=start_minutes),
        end_time=START + timedelta(minutes=end_minutes),
    )


class TestMedicationStock:
    def test_update_stock_takes_one_unit(self):
        medication = Medication(name="Aspirin", unit="tablet", stock=2)

        medication.update_stock()

        assert medication.stock == 1

    def test_update_stock_never_goes_negative(self):
        medication = Medication(name="Aspirin", unit="tablet", stock=0)

        with pytest.raises(InsufficientStockError, match="Aspirin"):
            medication.update_stock()
        assert medication.stock == 0

    def test_insufficient_stock_is_a_conflict(self):
        assert issubclass(InsufficientStockError, ConflictError)

    def test_update_medication_rejects_negative_stock(self):
        medication = Medication(name="Aspirin", unit="tablet", stock=3)

        with pytest.raises(ValidationError):
            medication.update_medication(stock=-2)
        assert medication.stock == 3

    def test_update_medication_ignores_none(self):
        medication = Medication(name="Aspirin", unit="tablet", stock=3)

        medication.update_medication(name=None, unit="ml")

        assert (medication.name, medication.unit) == ("Aspirin", "ml")


class TestBill:
    def test_ensure_stock_available_names_the_empty_line(self):
        bill = Bill(medications=[Medication(name="A", unit="u", stock=1), Medication(name="B", unit="u", stock=0)])

        with pytest.raises(InsufficientStockError, match="Medication B does not have enough stock."):
            bill.ensure_stock_available()

    def test_add_payment_links_both_sides(self):
        bill = Bill()
        payment = Payment(amount=Decimal("10.00"), method="cash")

        bill.add_payment_to_bill(payment)

        assert bill.payment is payment
        assert payment.bill is bill

    def test_second_payment_is_rejected(self):
        bill = Bill()
        first = Payment(amount=Decimal("10.00"), method="cash")
        bill.add_payment_to_bill(first)

        with pytest.raises(BillAlreadyPaidError):
            bill.add_payment_to_bill(Payment(amount=Decimal("5.00"), method="card"))
        assert bill.payment is first

    def test_add_medications_skips_duplicates(self):
        aspirin = Medication(name="Aspirin", unit="tablet")
        bill = Bill()

        bill.add_medications([aspirin, aspirin])

        assert bill.medications == [aspirin]

    def test_remove_medication_not_on_bill(self):
        with pytest.raises(NotFoundError):
            Bill().remove_medication(Medication(name="Aspirin", unit="tablet"))


class TestHospital:
    def test_add_doctors_requires_a_non_empty_batch(self):
        with pytest.raises(ValidationError):
            Hospital(name="H", address="A", phone="P").add_doctors([])

    def test_one_invalid_doctor_leaves_the_hospital_unchanged(self):
        hospital = Hospital(name="H", address="A", phone="P")
        doctors = [Doctor(**doctor_payload()), Doctor(**doctor_payload(location=""))]

        with pytest.raises(ValidationError, match="location"):
            hospital.add_doctors(doctors)
        assert hospital.doctors == []


class TestDoctor:
    @pytest.mark.parametrize("rating", [0, 6, None])
    def test_review_rating_bounds(self, rating):
        doctor = Doctor(**doctor_payload())

        with pytest.raises(ValidationError):
            doctor.add_review("Fine", rating)
        assert doctor.reviews == []

    def test_blank_review_text_is_a_validation_error(self):
        doctor = Doctor(**doctor_payload())

        with pytest.raises(ValidationError, match="Review text"):
            doctor.add_review("   ", 4)

    def test_add_review(self):
        doctor = Doctor(**doctor_payload())

        review = doctor.add_review("Very thorough", 5)

        assert doctor.reviews == [review]
        assert review.doctor is doctor

    def test_update_doctor_keeps_required_fields(self):
        doctor = Doctor(**doctor_payload())

        with pytest.raises(ValidationError):
            doctor.update_doctor(phone="   ")


class TestScheduling:
    @pytest.mark.parametrize(
        "existing, candidate, overlaps",
        [
            ((0, 30), (15, 45), True),
            ((0, 30), (30, 60), False),
            ((0, 60), (10, 20), True),
            ((30, 60), (0, 30), False),
        ],
    )
    def test_doctor_slots(self, existing, candidate, overlaps):
        doctor = Doctor(**doctor_payload())
        doctor.add_appointment(slot(*existing))

        if overlaps:
            with pytest.raises(DomainRuleError):
                doctor.add_appointment(slot(*candidate))
            assert len(doctor.appointments) == 1
        else:
            doctor.add_appointment(slot(*candidate))
            assert len(doctor.appointments) == 2

    def test_patient_slots(self):
        patient = Patient(first_name="Ana", last_name="Popescu", email="a@x.ro", phone="1")
        patient.add_appointment(slot(0, 30))

        with pytest.raises(DomainRuleError, match="Patient already has an appointment"):
            patient.add_appointment(slot(10, 20))

    def test_validate_schedule_normalizes_timezones(self):
        appointment = Appointment(
            start_time=datetime(2026, 11, 2, 11, 0, tzinfo=timezone(timedelta(hours=2))),
            end_time=datetime(2026, 11, 2, 9, 30, tzinfo=timezone.utc),
        )

        appointment.validate_schedule()

        assert appointment.start_time == datetime(2026, 11, 2, 9, 0)
        assert appointment.end_time == datetime(2026, 11, 2, 9, 30)

    @pytest.mark.parametrize("start, end", [(30, 30), (30, 0)])
    def test_validate_schedule_requires_positive_length(self, start, end):
        appointment = slot(start, end)

        with pytest.raises(ValidationError):
            appointment.validate_schedule()
