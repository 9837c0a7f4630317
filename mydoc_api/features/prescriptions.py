"""Prescription use cases, one handler per command or query."""
import logging
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..database import Medication, MedicationDosage, Prescription, Repository
from ..exceptions import ValidationError
from ..mapping import to_dto, to_dtos
from ..schemas import MedicationDosageDto, PrescriptionDto

logger = logging.getLogger(__name__)


class MedicationDosageRequest(BaseModel):
    medication_id: UUID
    dosage: str = Field(..., description="e.g. 500mg twice a day")
    quantity: int = Field(1, ge=1)


class GetAllPrescriptionsQuery(BaseModel):
    pass


class GetAllMedicationsFromPrescriptionQuery(BaseModel):
    prescription_id: UUID


class CreatePrescriptionCommand(BaseModel):
    description: Optional[str] = None
    medication_dosages: List[MedicationDosageRequest] = []


class DeletePrescriptionCommand(BaseModel):
    prescription_id: UUID


def get_all_prescriptions(query: GetAllPrescriptionsQuery, db: Session) -> List[PrescriptionDto]:
    return to_dtos(Repository(Prescription, db).get_all(), PrescriptionDto)


def get_all_medications_from_prescription(
    query: GetAllMedicationsFromPrescriptionQuery, db: Session
) -> List[MedicationDosageDto]:
    prescription = Repository(Prescription, db).get_or_404(
        query.prescription_id, "Prescription with given id not found"
    )
    return to_dtos(prescription.medication_dosages, MedicationDosageDto)


def create_prescription(command: CreatePrescriptionCommand, db: Session) -> PrescriptionDto:
    prescriptions = Repository(Prescription, db)
    medications = Repository(Medication, db)

    prescription = Prescription(description=command.description)
    for entry in command.medication_dosages:
        if not entry.dosage.strip():
            raise ValidationError("The field 'dosage' in medication dosage must not be empty")
        medication = medications.resolve(entry.medication_id, f"Medication with given id ({entry.medication_id}) not found")
        prescription.medication_dosages.append(
            MedicationDosage(medication=medication, dosage=entry.dosage, quantity=entry.quantity)
        )

    prescriptions.add(prescription)
    prescriptions.commit()
    prescriptions.refresh(prescription)
    logger.info("Created prescription %s with %d medication(s)", prescription.id, len(prescription.medication_dosages))
    return to_dto(prescription, PrescriptionDto)


def delete_prescription(command: DeletePrescriptionCommand, db: Session) -> None:
    prescriptions = Repository(Prescription, db)
    prescriptions.delete(command.prescription_id)
    prescriptions.commit()
    logger.info("Deleted prescription %s", command.prescription_id)
