import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..database import Medication, Repository, repository_for
from ..exceptions import MyDocError
from ..mapping import to_dto, to_dtos, to_entity
from ..schemas import MedicationDto

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/api/medications", tags=["Medications"])

# ==================== PYDANTIC MODELS ====================

class CreateMedicationDto(BaseModel):
    name: Optional[str] = None
    unit: Optional[str] = Field(None, description="tablet, ml, mg, ...")
    stock: int = Field(0, ge=0)


class UpdateMedicationDto(BaseModel):
    name: Optional[str] = None
    unit: Optional[str] = None
    stock: Optional[int] = None

# ==================== API ENDPOINTS ====================

@router.get("", response_model=List[MedicationDto])
async def get_all_medications(medications: Repository = Depends(repository_for(Medication))):
    """Get all medications."""
    return to_dtos(medications.get_all(), MedicationDto)


@router.get("/{medication_id}", response_model=MedicationDto)
async def get_medication_by_id(medication_id: UUID, medications: Repository = Depends(repository_for(Medication))):
    medication = medications.get_or_404(medication_id, "There is no medication with given id")
    return to_dto(medication, MedicationDto)


@router.post("", response_model=MedicationDto, status_code=201)
async def create_medication(request: CreateMedicationDto, medications: Repository = Depends(repository_for(Medication))):
    """Add a medication."""
    medication = to_entity(request, Medication, stock=request.stock)
    medication.validate_required()

    medications.add(medication)
    medications.commit()
    medications.refresh(medication)
    logger.info("Created medication %s", medication.id)
    return to_dto(medication, MedicationDto)


@router.put("/{medication_id}", response_model=MedicationDto)
async def update_medication(
    medication_id: UUID,
    request: UpdateMedicationDto,
    medications: Repository = Depends(repository_for(Medication)),
):
    """
    Update a specific medication

    Only the submitted fields are copied onto the stored medication.
    """
    medication = medications.get_or_404(medication_id, "There is no medication with the given id")

    try:
        medication.update_medication(**request.model_dump(exclude_unset=True))
        medications.commit()
    except MyDocError:
        medications.rollback()
        raise

    medications.refresh(medication)
    logger.info("Updated medication %s", medication_id)
    return to_dto(medication, MedicationDto)


@router.delete("/{medication_id}", status_code=204)
async def delete_medication(medication_id: UUID, medications: Repository = Depends(repository_for(Medication))):
    """Delete a specific Medication."""
    medications.delete(medication_id)
    medications.commit()
    logger.info("Deleted medication %s", medication_id)
