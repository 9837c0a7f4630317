from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..features.patients import (
    CreatePatientCommand,
    DeletePatientCommand,
    GetAllAppointmentsFromPatientQuery,
    GetAllPatientsQuery,
    create_patient,
    delete_patient,
    get_all_appointments_from_patient,
    get_all_patients,
)
from ..schemas import AppointmentDto, PatientDto

router = APIRouter(prefix="/v1/api/patients", tags=["Patients"])


@router.get("", response_model=List[PatientDto])
async def get_patients(db: Session = Depends(get_db)):
    """Get all Patients."""
    return get_all_patients(GetAllPatientsQuery(), db)


@router.get("/{patient_id}/appointments", response_model=List[AppointmentDto])
async def get_patient_appointments(patient_id: UUID, db: Session = Depends(get_db)):
    """Get all appointments of a specific Patient."""
    return get_all_appointments_from_patient(GetAllAppointmentsFromPatientQuery(patient_id=patient_id), db)


@router.post("", response_model=PatientDto, status_code=201)
async def post_patient(command: CreatePatientCommand, db: Session = Depends(get_db)):
    """Create a Patient."""
    return create_patient(command, db)


@router.delete("/{patient_id}", status_code=204)
async def remove_patient(patient_id: UUID, db: Session = Depends(get_db)):
    """Delete a specific Patient."""
    delete_patient(DeletePatientCommand(patient_id=patient_id), db)
