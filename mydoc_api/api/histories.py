import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..database import History, Medication, MedicationDosageHistory, Patient, Repository, repository_for
from ..exceptions import ValidationError
from ..mapping import to_dto, to_dtos
from ..schemas import HistoryDto, MedicationDosageHistoryDto

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/api/histories", tags=["Histories"])

# ==================== PYDANTIC MODELS ====================

class MedicationDosageHistoryRequest(BaseModel):
    medication_id: UUID
    dosage: str
    quantity: int = Field(1, ge=1)


class CreateHistoryDto(BaseModel):
    patient_id: UUID
    description: Optional[str] = None
    medication_dosage_histories: List[MedicationDosageHistoryRequest] = []

# ==================== API ENDPOINTS ====================

@router.get("", response_model=List[HistoryDto])
async def get_all_histories(histories: Repository = Depends(repository_for(History))):
    """Get all histories."""
    return to_dtos(histories.get_all(), HistoryDto)


@router.get("/{history_id}/medications", response_model=List[MedicationDosageHistoryDto])
async def get_medications_from_history(history_id: UUID, histories: Repository = Depends(repository_for(History))):
    """Get the medications recorded in a specific history."""
    history = histories.get_or_404(history_id, "History with given id not found")
    return to_dtos(history.medication_dosage_histories, MedicationDosageHistoryDto)


@router.post("", response_model=HistoryDto, status_code=201)
async def create_history(
    request: CreateHistoryDto,
    histories: Repository = Depends(repository_for(History)),
    patients: Repository = Depends(repository_for(Patient)),
    medications: Repository = Depends(repository_for(Medication)),
):
    """
    Add a history record to a patient

    The patient and every referenced medication must exist.
    """
    patient = patients.resolve(request.patient_id, "Patient with given id not found")

    history = History(description=request.description)
    for entry in request.medication_dosage_histories:
        if not entry.dosage.strip():
            raise ValidationError("The field 'dosage' in medication dosage history must not be empty")
        medication = medications.resolve(entry.medication_id, f"Medication with given id ({entry.medication_id}) not found")
        history.medication_dosage_histories.append(
            MedicationDosageHistory(medication=medication, dosage=entry.dosage, quantity=entry.quantity)
        )
    history.add_patient_to_history(patient)

    histories.add(history)
    histories.commit()
    histories.refresh(history)
    logger.info("Created history %s for patient %s", history.id, patient.id)
    return to_dto(history, HistoryDto)


@router.delete("/{history_id}", status_code=204)
async def delete_history(history_id: UUID, histories: Repository = Depends(repository_for(History))):
    """Delete a specific History record."""
    histories.delete(history_id)
    histories.commit()
    logger.info("Deleted history %s", history_id)
