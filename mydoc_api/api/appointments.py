import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..database import Appointment, Doctor, Patient, Repository, repository_for
from ..exceptions import MyDocError, ValidationError
from ..mapping import to_dto, to_dtos, to_entity
from ..schemas import AppointmentDto

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/api/appointments", tags=["Appointments"])

# ==================== PYDANTIC MODELS ====================

class CreateAppointmentDto(BaseModel):
    doctor_id: Optional[UUID] = Field(None, description="Ignored when booking through /doctors/{id}/appointments")
    patient_id: UUID
    start_time: datetime
    end_time: datetime
    description: Optional[str] = None

# ==================== HELPER FUNCTIONS ====================

def book_appointment(doctor: Doctor, patient: Patient, request: CreateAppointmentDto) -> Appointment:
    """
    Bind a new appointment to both the doctor and the patient.

    Either side may reject the slot; callers must roll back the unit of
    work when this raises.
    """
    appointment = to_entity(request, Appointment, doctor_id=doctor.id, patient_id=patient.id)
    appointment.validate_schedule()
    doctor.add_appointment(appointment)
    patient.add_appointment(appointment)
    return appointment

# ==================== API ENDPOINTS ====================

@router.get("", response_model=List[AppointmentDto])
async def get_all_appointments(appointments: Repository = Depends(repository_for(Appointment))):
    """Get all Appointments."""
    return to_dtos(appointments.get_all(), AppointmentDto)


@router.get("/{appointment_id}", response_model=AppointmentDto)
async def get_appointment(appointment_id: UUID, appointments: Repository = Depends(repository_for(Appointment))):
    appointment = appointments.get_or_404(appointment_id, "Appointment with given id not found")
    return to_dto(appointment, AppointmentDto)


@router.post("", response_model=AppointmentDto, status_code=201)
async def create_appointment(
    request: CreateAppointmentDto,
    appointments: Repository = Depends(repository_for(Appointment)),
    doctors: Repository = Depends(repository_for(Doctor)),
    patients: Repository = Depends(repository_for(Patient)),
):
    """
    Create an Appointment

    Both the doctor and the patient must exist and accept the slot; the
    appointment is only persisted after both associations succeed.
    """
    if request.doctor_id is None:
        raise ValidationError("The field 'doctor_id' in appointment must not be empty")
    doctor = doctors.resolve(request.doctor_id, "Doctor with given id not found")
    patient = patients.resolve(request.patient_id, "Patient with given id not found")

    try:
        appointment = book_appointment(doctor, patient, request)
        appointments.add(appointment)
        appointments.commit()
    except MyDocError:
        appointments.rollback()
        raise

    appointments.refresh(appointment)
    logger.info("Created appointment %s for doctor %s and patient %s", appointment.id, doctor.id, patient.id)
    return to_dto(appointment, AppointmentDto)


@router.delete("/{appointment_id}", status_code=204)
async def delete_appointment(appointment_id: UUID, appointments: Repository = Depends(repository_for(Appointment))):
    """Delete a specific Appointment."""
    appointments.delete(appointment_id)
    appointments.commit()
    logger.info("Deleted appointment %s", appointment_id)
