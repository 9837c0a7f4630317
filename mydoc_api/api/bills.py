import logging
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..database import Bill, Medication, Payment, Repository, repository_for
from ..exceptions import MyDocError, NotFoundError
from ..mapping import to_dto, to_dtos, to_entity
from ..schemas import BillDto, MedicationDto, PaymentDto

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/api/bills", tags=["Bills"])

# ==================== PYDANTIC MODELS ====================

class CreateBillDto(BaseModel):
    description: Optional[str] = None


class MedicationReference(BaseModel):
    id: UUID


class CreatePaymentDto(BaseModel):
    amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    method: Optional[str] = Field(None, description="cash/card/insurance")

# ==================== API ENDPOINTS ====================

@router.get("", response_model=List[BillDto])
async def get_all_bills(bills: Repository = Depends(repository_for(Bill))):
    """Get all Bills."""
    return to_dtos(bills.get_all(), BillDto)


@router.get("/{bill_id}", response_model=BillDto)
async def get_bill_by_id(bill_id: UUID, bills: Repository = Depends(repository_for(Bill))):
    bill = bills.get_or_404(bill_id, "There is no bill with given id")
    return to_dto(bill, BillDto)


@router.get("/{bill_id}/medications", response_model=List[MedicationDto])
async def get_medications_from_bill(bill_id: UUID, bills: Repository = Depends(repository_for(Bill))):
    """Get medications of a specific bill."""
    bill = bills.get_or_404(bill_id, "Bill with given id not found")
    return to_dtos(bill.medications, MedicationDto)


@router.get("/{bill_id}/payment", response_model=PaymentDto)
async def get_payment_from_bill(bill_id: UUID, bills: Repository = Depends(repository_for(Bill))):
    """Get payment details of a specific bill."""
    bill = bills.get_or_404(bill_id, "Bill with given id not found")
    if bill.payment is None:
        raise NotFoundError("The bill has no payment")
    return to_dto(bill.payment, PaymentDto)


@router.post("", response_model=BillDto, status_code=201)
async def create_bill(request: CreateBillDto, bills: Repository = Depends(repository_for(Bill))):
    bill = to_entity(request, Bill)
    bills.add(bill)
    bills.commit()
    bills.refresh(bill)
    logger.info("Created bill %s", bill.id)
    return to_dto(bill, BillDto)


@router.post("/{bill_id}/medications", response_model=List[MedicationDto])
async def register_medications_to_bill(
    bill_id: UUID,
    request: List[MedicationReference],
    bills: Repository = Depends(repository_for(Bill)),
    medications: Repository = Depends(repository_for(Medication)),
):
    """
    Add medications to a Bill

    Every id must resolve before anything is added; the first unknown id
    fails the whole request.
    """
    bill = bills.get_or_404(bill_id, "Bill with given id not found")

    to_add = [
        medications.resolve(item.id, f"Medication with given id ({item.id}) not found")
        for item in request
    ]

    bill.add_medications(to_add)
    bills.update(bill)
    bills.commit()
    logger.info("Added %d medication(s) to bill %s", len(to_add), bill_id)
    return to_dtos(to_add, MedicationDto)


@router.post("/{bill_id}/payment", response_model=PaymentDto)
async def register_payment_to_bill(
    bill_id: UUID,
    request: CreatePaymentDto,
    bills: Repository = Depends(repository_for(Bill)),
    medications: Repository = Depends(repository_for(Medication)),
    payments: Repository = Depends(repository_for(Payment)),
):
    """
    Add a payment to a bill

    Validates:
    - The bill has no payment yet
    - Every medication on the bill has at least one unit in stock
    Then:
    - Takes one unit of stock per medication line
    - Links the payment and the bill

    The bill and its medication rows are locked for the duration of the
    request and the whole workflow commits or rolls back as one unit.
    """
    bill = bills.get_or_404(bill_id, "Bill with given id not found", for_update=True)

    try:
        line_ids = [medication.id for medication in bill.medications]
        if line_ids:
            medications.find(Medication.id.in_(line_ids), for_update=True)

        bill.ensure_unpaid()
        bill.ensure_stock_available()

        payment = to_entity(request, Payment)
        payment.validate_required()
        bill.add_payment_to_bill(payment)
        payments.add(payment)

        for medication in bill.medications:
            medication.update_stock()

        bills.update(bill)
        bills.commit()
    except MyDocError:
        bills.rollback()
        raise

    payments.refresh(payment)
    logger.info("Registered payment %s on bill %s", payment.id, bill_id)
    return to_dto(payment, PaymentDto)


@router.delete("/{bill_id}", status_code=204)
async def delete_bill(bill_id: UUID, bills: Repository = Depends(repository_for(Bill))):
    bills.delete(bill_id)
    bills.commit()
    logger.info("Deleted bill %s", bill_id)


@router.delete("/{bill_id}/medications/{medication_id}", status_code=204)
async def delete_medication_from_bill(
    bill_id: UUID,
    medication_id: UUID,
    bills: Repository = Depends(repository_for(Bill)),
    medications: Repository = Depends(repository_for(Medication)),
):
    """Delete a medication from a bill."""
    bill = bills.get_or_404(bill_id, "Bill with given id not found")
    medication = medications.get_or_404(medication_id, "Medication with given id not found")

    bill.remove_medication(medication)
    bills.update(bill)
    bills.commit()
    logger.info("Removed medication %s from bill %s", medication_id, bill_id)
