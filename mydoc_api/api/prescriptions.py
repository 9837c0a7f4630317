from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..features.prescriptions import (
    CreatePrescriptionCommand,
    DeletePrescriptionCommand,
    GetAllMedicationsFromPrescriptionQuery,
    GetAllPrescriptionsQuery,
    create_prescription,
    delete_prescription,
    get_all_medications_from_prescription,
    get_all_prescriptions,
)
from ..schemas import MedicationDosageDto, PrescriptionDto

router = APIRouter(prefix="/v1/api/prescriptions", tags=["Prescriptions"])


@router.get("", response_model=List[PrescriptionDto])
async def get_prescriptions(db: Session = Depends(get_db)):
    """Get all Prescriptions."""
    return get_all_prescriptions(GetAllPrescriptionsQuery(), db)


@router.get("/{prescription_id}/medicationsDosages", response_model=List[MedicationDosageDto])
async def get_prescription_medications(prescription_id: UUID, db: Session = Depends(get_db)):
    """Get the medication dosages of a specific Prescription."""
    query = GetAllMedicationsFromPrescriptionQuery(prescription_id=prescription_id)
    return get_all_medications_from_prescription(query, db)


@router.post("", response_model=PrescriptionDto, status_code=201)
async def post_prescription(command: CreatePrescriptionCommand, db: Session = Depends(get_db)):
    """Create a Prescription."""
    return create_prescription(command, db)


@router.delete("/{prescription_id}", status_code=204)
async def remove_prescription(prescription_id: UUID, db: Session = Depends(get_db)):
    """Delete a specific Prescription."""
    delete_prescription(DeletePrescriptionCommand(prescription_id=prescription_id), db)
