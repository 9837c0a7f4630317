import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..database import Appointment, Doctor, Hospital, Patient, Repository, repository_for
from ..exceptions import MyDocError
from ..mapping import to_dto, to_dtos, to_entity
from ..schemas import AppointmentDto, DoctorDto, ReviewDto
from .appointments import CreateAppointmentDto, book_appointment

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/api/doctors", tags=["Doctors"])

# ==================== PYDANTIC MODELS ====================

class CreateDoctorDto(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    specialization: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    title: Optional[str] = Field(None, description="Dr., Prof., ...")
    profession: Optional[str] = None
    location: Optional[str] = None
    hospital_id: Optional[UUID] = None


class UpdateDoctorDto(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    specialization: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    title: Optional[str] = None
    profession: Optional[str] = None
    location: Optional[str] = None


class CreateReviewDto(BaseModel):
    review: str
    rating: int = Field(5, description="1 to 5")

# ==================== API ENDPOINTS ====================

@router.get("", response_model=List[DoctorDto])
async def get_all_doctors(doctors: Repository = Depends(repository_for(Doctor))):
    """Get all doctors."""
    return to_dtos(doctors.get_all(), DoctorDto)


@router.get("/{doctor_id}", response_model=DoctorDto)
async def get_doctor(doctor_id: UUID, doctors: Repository = Depends(repository_for(Doctor))):
    doctor = doctors.get_or_404(doctor_id, "Doctor with given id not found")
    return to_dto(doctor, DoctorDto)


@router.get("/{doctor_id}/appointments", response_model=List[AppointmentDto])
async def get_appointments_from_doctor(
    doctor_id: UUID,
    doctors: Repository = Depends(repository_for(Doctor)),
    appointments: Repository = Depends(repository_for(Appointment)),
):
    """Get all appointments of a doctor."""
    doctors.get_or_404(doctor_id, "Doctor with given id not found")
    return to_dtos(appointments.find(Appointment.doctor_id == doctor_id), AppointmentDto)


@router.get("/{doctor_id}/reviews", response_model=List[ReviewDto])
async def get_reviews_from_doctor(doctor_id: UUID, doctors: Repository = Depends(repository_for(Doctor))):
    doctor = doctors.get_or_404(doctor_id, "Doctor with given id not found")
    return to_dtos(doctor.reviews, ReviewDto)


@router.post("", response_model=DoctorDto, status_code=201)
async def create_doctor(
    request: CreateDoctorDto,
    doctors: Repository = Depends(repository_for(Doctor)),
    hospitals: Repository = Depends(repository_for(Hospital)),
):
    """
    Add a doctor to the database

    All descriptive fields are required; ``hospital_id`` is optional but
    must reference an existing hospital when given.
    """
    doctor = to_entity(request, Doctor)
    doctor.validate_required()
    if request.hospital_id is not None:
        hospitals.resolve(request.hospital_id, "Hospital with given id not found")

    doctors.add(doctor)
    doctors.commit()
    doctors.refresh(doctor)
    logger.info("Created doctor %s", doctor.id)
    return to_dto(doctor, DoctorDto)


@router.post("/{doctor_id}/reviews", response_model=DoctorDto)
async def add_review_to_doctor(
    doctor_id: UUID,
    request: CreateReviewDto,
    doctors: Repository = Depends(repository_for(Doctor)),
):
    """Add a review to a doctor."""
    doctor = doctors.get_or_404(doctor_id, "Doctor with given id not found")

    review = doctor.add_review(request.review, request.rating)
    doctors.commit()
    doctors.refresh(doctor)
    logger.info("Added review %s to doctor %s", review.id, doctor_id)
    return to_dto(doctor, DoctorDto)


@router.post("/{doctor_id}/appointments", response_model=List[AppointmentDto])
async def register_appointments_to_doctor(
    doctor_id: UUID,
    request: List[CreateAppointmentDto],
    doctors: Repository = Depends(repository_for(Doctor)),
    patients: Repository = Depends(repository_for(Patient)),
    appointments: Repository = Depends(repository_for(Appointment)),
):
    """
    Add a batch of appointments to a doctor

    The batch is all-or-nothing: an unknown patient or a rejected slot
    fails every appointment in the request.
    """
    doctor = doctors.get_or_404(doctor_id, "Doctor with given id not found")

    booked = []
    try:
        for item in request:
            patient = patients.resolve(item.patient_id, f"Patient with given id ({item.patient_id}) not found")
            appointment = book_appointment(doctor, patient, item)
            appointments.add(appointment)
            booked.append(appointment)
        appointments.commit()
    except MyDocError:
        appointments.rollback()
        raise

    logger.info("Registered %d appointment(s) for doctor %s", len(booked), doctor_id)
    return to_dtos(booked, AppointmentDto)


@router.put("/{doctor_id}", response_model=DoctorDto)
async def update_doctor(
    doctor_id: UUID,
    request: UpdateDoctorDto,
    doctors: Repository = Depends(repository_for(Doctor)),
):
    """Update Doctor data."""
    doctor = doctors.get_or_404(doctor_id, "Doctor with given id not found")

    try:
        doctor.update_doctor(**request.model_dump(exclude_unset=True))
        doctors.commit()
    except MyDocError:
        doctors.rollback()
        raise

    doctors.refresh(doctor)
    logger.info("Updated doctor %s", doctor_id)
    return to_dto(doctor, DoctorDto)


@router.delete("/{doctor_id}", status_code=204)
async def delete_doctor(doctor_id: UUID, doctors: Repository = Depends(repository_for(Doctor))):
    """Delete a Doctor."""
    doctors.delete(doctor_id)
    doctors.commit()
    logger.info("Deleted doctor %s", doctor_id)
