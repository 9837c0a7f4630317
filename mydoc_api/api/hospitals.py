import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..database import Doctor, Hospital, Repository, repository_for
from ..exceptions import MyDocError
from ..mapping import to_dto, to_dtos, to_entity
from ..schemas import DoctorDto, HospitalDto
from .doctors import CreateDoctorDto

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/api/hospitals", tags=["Hospitals"])

# ==================== PYDANTIC MODELS ====================

class CreateHospitalDto(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None

# ==================== API ENDPOINTS ====================

@router.get("", response_model=List[HospitalDto])
async def get_all_hospitals(hospitals: Repository = Depends(repository_for(Hospital))):
    """Get all hospitals."""
    return to_dtos(hospitals.get_all(), HospitalDto)


@router.get("/{hospital_id}", response_model=HospitalDto)
async def get_hospital(hospital_id: UUID, hospitals: Repository = Depends(repository_for(Hospital))):
    hospital = hospitals.get_or_404(hospital_id, "Hospital with given id not found")
    return to_dto(hospital, HospitalDto)


@router.get("/{hospital_id}/doctors", response_model=List[DoctorDto])
async def get_all_doctors_from_hospital(
    hospital_id: UUID,
    hospitals: Repository = Depends(repository_for(Hospital)),
    doctors: Repository = Depends(repository_for(Doctor)),
):
    """Get all Doctors from a specific Hospital."""
    hospitals.get_or_404(hospital_id, "Hospital with given id not found")
    return to_dtos(doctors.find(Doctor.hospital_id == hospital_id), DoctorDto)


@router.post("", response_model=HospitalDto, status_code=201)
async def create_hospital(request: CreateHospitalDto, hospitals: Repository = Depends(repository_for(Hospital))):
    """Create a Hospital."""
    hospital = to_entity(request, Hospital)
    hospital.validate_required()

    hospitals.add(hospital)
    hospitals.commit()
    hospitals.refresh(hospital)
    logger.info("Created hospital %s", hospital.id)
    return to_dto(hospital, HospitalDto)


@router.post("/{hospital_id}/doctors", status_code=204)
async def register_new_doctors_to_hospital(
    hospital_id: UUID,
    request: List[CreateDoctorDto],
    hospitals: Repository = Depends(repository_for(Hospital)),
    doctors: Repository = Depends(repository_for(Doctor)),
):
    """
    Add doctors to a Hospital

    One invalid doctor fails the whole batch and nothing is stored.
    """
    hospital = hospitals.get_or_404(hospital_id, "Hospital with given id not found")

    new_doctors = [to_entity(item, Doctor, hospital_id=hospital.id) for item in request]
    try:
        hospital.add_doctors(new_doctors)
        for doctor in new_doctors:
            doctors.add(doctor)
        doctors.commit()
    except MyDocError:
        doctors.rollback()
        raise

    logger.info("Registered %d doctor(s) to hospital %s", len(new_doctors), hospital_id)


@router.delete("/{hospital_id}", status_code=204)
async def delete_hospital(hospital_id: UUID, hospitals: Repository = Depends(repository_for(Hospital))):
    """Delete a specific Hospital."""
    hospitals.delete(hospital_id)
    hospitals.commit()
    logger.info("Deleted hospital %s", hospital_id)
