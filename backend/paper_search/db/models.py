"""SQLAlchemy ORM models."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func

from backend.paper_search.models.paper import ORIGINATOR_MAX, SHORT_MAX, URL_MAX


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class Paper(Base):
    """Paper table - store of record for indexed papers."""

    __tablename__ = "paper"
    __table_args__ = (
        UniqueConstraint("url", name="uq_paper_url"),
        Index("idx_paper_published_at", "published_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(SHORT_MAX), nullable=False)
    url: Mapped[str] = mapped_column(String(URL_MAX), nullable=False)
    reference: Mapped[str] = mapped_column(String(SHORT_MAX), nullable=False)
    body: Mapped[str] = mapped_column(String(SHORT_MAX), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    originator: Mapped[str] = mapped_column(String(ORIGINATOR_MAX), nullable=False)
    paper_type: Mapped[str] = mapped_column(String(SHORT_MAX), nullable=False)
    published_at: Mapped[date] = mapped_column(Date, nullable=False)
    resolution: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
