"""Patient use cases.

Each command or query is one object handled by one function; the
patients router calls the handlers directly.
"""
import logging
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..database import Appointment, Patient, Repository
from ..mapping import to_dto, to_dtos, to_entity
from ..schemas import AppointmentDto, PatientDto

logger = logging.getLogger(__name__)


class GetAllPatientsQuery(BaseModel):
    pass


class GetAllAppointmentsFromPatientQuery(BaseModel):
    patient_id: UUID


class CreatePatientCommand(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[int] = Field(None, ge=0)


class DeletePatientCommand(BaseModel):
    patient_id: UUID


def get_all_patients(query: GetAllPatientsQuery, db: Session) -> List[PatientDto]:
    return to_dtos(Repository(Patient, db).get_all(), PatientDto)


def get_all_appointments_from_patient(query: GetAllAppointmentsFromPatientQuery, db: Session) -> List[AppointmentDto]:
    Repository(Patient, db).get_or_404(query.patient_id, "Patient with given id not found")
    appointments = Repository(Appointment, db).find(Appointment.patient_id == query.patient_id)
    return to_dtos(appointments, AppointmentDto)


def create_patient(command: CreatePatientCommand, db: Session) -> PatientDto:
    patients = Repository(Patient, db)
    patient = to_entity(command, Patient)
    patient.validate_required()

    patients.add(patient)
    patients.commit()
    patients.refresh(patient)
    logger.info("Created patient %s", patient.id)
    return to_dto(patient, PatientDto)


def delete_patient(command: DeletePatientCommand, db: Session) -> None:
    patients = Repository(Patient, db)
    patients.delete(command.patient_id)
    patients.commit()
    logger.info("Deleted patient %s", command.patient_id)
