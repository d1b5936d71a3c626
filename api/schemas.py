# api/schemas.py

from typing import List, Optional, TypeVar, Generic
from pydantic import BaseModel, ConfigDict
from datetime import datetime


# Request bodies. Presence and shape rules live in core.validation so that
# every offending field is reported at once; only JSON types are checked here.
class BookCreate(BaseModel):
    isbn: Optional[int] = None
    title: Optional[str] = None
    author: Optional[str] = None


class BorrowerCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class BorrowCreate(BaseModel):
    book_id: Optional[int] = None
    borrower_id: Optional[int] = None


# Reusable Schemas for Models
class BookSchema(BaseModel):
    id: int
    isbn: int
    title: str
    author: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BorrowerSchema(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BorrowRecordSchema(BaseModel):
    id: int
    book_id: int
    borrower_id: int
    status: str
    borrowed_at: datetime
    returned_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BorrowResponse(BaseModel):
    message: str
    data: BorrowRecordSchema


class MessageResponse(BaseModel):
    message: str


class BookStatusSchema(BaseModel):
    book_id: int
    status: str
    open_record_id: Optional[int] = None


DataT = TypeVar('DataT')

class PaginatedResponse(BaseModel, Generic[DataT]):
    """
    Generic schema for paginated API responses.
    """
    page: int
    per_page: int
    total_pages: int
    total_items: int
    data: List[DataT]
