# api/routes/borrowers.py

from fastapi import APIRouter, Depends, status

from api.dependencies import get_lending_service, require_bearer_token
from api.schemas import BorrowerCreate, BorrowerSchema
from core.services.lending_service import LendingService

router = APIRouter(prefix="/borrowers", tags=["borrowers"], dependencies=[Depends(require_bearer_token)])

@router.post("", response_model=BorrowerSchema, status_code=status.HTTP_201_CREATED)
def create_borrower(payload: BorrowerCreate, service: LendingService = Depends(get_lending_service)):
    return service.register_borrower(payload.name, payload.email)
