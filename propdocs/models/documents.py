from __future__ import annotations

import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base


class DocumentStatusEnum(str, enum.Enum):
    CURRENT = "gällande"
    UNCERTAIN = "osäker"
    SUPERSEDED = "ersatt"

    @classmethod
    def parse(cls, value: str) -> "DocumentStatusEnum":
        """Resolve a stored value ("osäker") or a member name ("uncertain")."""
        token = value.strip()
        try:
            return cls(token)
        except ValueError:
            try:
                return cls[token.upper()]
            except KeyError:
                raise ValueError(f"Unknown document status: {value!r}") from None


class Document(Base):
    __tablename__ = "documents"
    __table_args__ = (Index("ix_documents_building_type_year", "building_id", "document_type", "year"),)

    id = Column(Integer, primary_key=True)
    filename = Column(String, nullable=False)
    document_type = Column(String, nullable=False)  # "ritning", "OVK", "brandskydd", "service", ...
    building_id = Column(Integer, ForeignKey("buildings.id", ondelete="CASCADE"), nullable=False)
    status = Column(
        Enum(
            DocumentStatusEnum,
            name="document_status",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=DocumentStatusEnum.CURRENT,
    )
    year = Column(Integer, nullable=False)
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    file_url = Column(String, nullable=False)

    building = relationship("Building", back_populates="documents")
