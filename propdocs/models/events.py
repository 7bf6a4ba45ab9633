from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func
from .base import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    building_id = Column(Integer, ForeignKey("buildings.id", ondelete="CASCADE"), nullable=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="SET NULL"), nullable=True)
    type = Column(String, nullable=False)  # "upload", "status_changed"
    data = Column(JSON, nullable=False, default=dict)
    at = Column(DateTime(timezone=True), server_default=func.now())
