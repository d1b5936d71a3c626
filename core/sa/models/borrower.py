# core/sa/models/borrower.py
from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, TimestampMixin

class Borrower(Base, TimestampMixin):
    __tablename__ = 'borrowers'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    def __repr__(self):
        return f"<Borrower(id={self.id}, email='{self.email}')>"
