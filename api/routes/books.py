# api/routes/books.py

from typing import List
from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_lending_service, require_bearer_token, throttle_borrow
from api.schemas import (
    BookCreate, BookSchema, BookStatusSchema, BorrowCreate, BorrowRecordSchema,
    BorrowResponse, MessageResponse, PaginatedResponse
)
from core.services.lending_service import LendingService

router = APIRouter(prefix="/books", tags=["books"], dependencies=[Depends(require_bearer_token)])

@router.post("", response_model=BookSchema, status_code=status.HTTP_201_CREATED)
def create_book(payload: BookCreate, service: LendingService = Depends(get_lending_service)):
    """Add a book to the catalog. The ISBN must agree with any existing entry."""
    return service.add_book(payload.isbn, payload.title, payload.author)

@router.get("", response_model=PaginatedResponse[BookSchema])
def list_books(
    page: int = Query(default=1, ge=1, description="Page number"),
    service: LendingService = Depends(get_lending_service),
):
    result = service.list_books(page=page)
    return PaginatedResponse[BookSchema](
        page=result.page,
        per_page=result.per_page,
        total_pages=result.total_pages,
        total_items=result.total_items,
        data=[BookSchema.model_validate(book) for book in result.items],
    )

@router.post(
    "/borrow",
    response_model=BorrowResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(throttle_borrow)],
)
def borrow_book(payload: BorrowCreate, service: LendingService = Depends(get_lending_service)):
    """
    Open a loan. Fails with 409 while the book is on loan to anyone.
    """
    record = service.borrow_book(payload.book_id, payload.borrower_id)
    return BorrowResponse(
        message="Book borrowed successfully.",
        data=BorrowRecordSchema.model_validate(record),
    )

@router.put("/borrow/{record_id}/return", response_model=MessageResponse)
def return_book(record_id: int, service: LendingService = Depends(get_lending_service)):
    service.return_book(record_id)
    return MessageResponse(message="Book returned successfully.")

@router.get("/{book_id}/status", response_model=BookStatusSchema)
def get_book_status(book_id: int, service: LendingService = Depends(get_lending_service)):
    state, open_record = service.book_status(book_id)
    return BookStatusSchema(
        book_id=book_id,
        status=state.value,
        open_record_id=open_record.id if open_record else None,
    )

@router.get("/{book_id}/history", response_model=List[BorrowRecordSchema])
def get_loan_history(book_id: int, service: LendingService = Depends(get_lending_service)):
    """Every loan of the book, newest first."""
    return [BorrowRecordSchema.model_validate(r) for r in service.loan_history(book_id)]
