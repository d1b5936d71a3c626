# core/sa/repositories/borrower.py
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import DuplicateEmailError
from core.sa.models import Borrower
from core.validation import validate_borrower_input, normalize_email

logger = logging.getLogger(__name__)

class BorrowerRepository:
    """Repository for managing Borrower entities."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, name: str, email: str) -> Borrower:
        """Register a new borrower.

        Raises:
            ValidationError: If name is empty or email is malformed
            DuplicateEmailError: If the email is already registered
        """
        validate_borrower_input(name, email)
        email = normalize_email(email)

        # Check if borrower already exists
        if self.get_by_email(email) is not None:
            raise DuplicateEmailError(email)

        borrower = Borrower(name=name.strip(), email=email)
        self.session.add(borrower)
        try:
            self.session.flush()
        except IntegrityError:
            self.session.rollback()
            raise DuplicateEmailError(email)

        logger.info(f"Registered borrower {borrower.id}")
        return borrower

    def get_by_id(self, borrower_id: int) -> Optional[Borrower]:
        return self.session.get(Borrower, borrower_id)

    def get_by_email(self, email: str) -> Optional[Borrower]:
        stmt = select(Borrower).where(Borrower.email == normalize_email(email))
        return self.session.execute(stmt).scalar_one_or_none()

    def exists(self, borrower_id: int) -> bool:
        stmt = select(Borrower.id).where(Borrower.id == borrower_id)
        return self.session.execute(stmt).first() is not None
