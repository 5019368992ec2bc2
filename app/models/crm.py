"""CRM models — Clients and their procurement Requirements."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from ..database import UTCDateTime
from .base import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Client(Base):
    """Buying organisation (distributor, hospital network, lab...)."""

    __tablename__ = "clients"
    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    country = Column(String(100))
    segment = Column(String(100))  # pharmaceuticals, distribution, research...
    contact_name = Column(String(255))
    contact_email = Column(String(255))
    contact_phone = Column(String(100))
    status = Column(String(20), default="active")  # active | inactive | pending
    notes = Column(Text)
    created_at = Column(UTCDateTime, default=_now)
    updated_at = Column(UTCDateTime, default=_now, onupdate=_now)

    requirements = relationship(
        "ClientRequirement", back_populates="client", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("ix_clients_created_at", "created_at"),)


class ClientRequirement(Base):
    """A client's stated procurement need for one product."""

    __tablename__ = "client_requirements"
    id = Column(String(36), primary_key=True, default=_uuid)
    client_id = Column(
        String(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False
    )
    product_name = Column(String(255))
    api_name = Column(String(255))
    dosage_form = Column(String(100))
    strength = Column(String(100))
    annual_volume = Column(Float)  # canonical name: quantity
    unit = Column(String(50))
    budget_usd = Column(Float)
    deadline = Column(String(50))  # ISO date
    priority = Column(String(20))  # low | medium | high
    status = Column(String(20), default="open")
    notes = Column(Text)
    created_at = Column(UTCDateTime, default=_now)
    updated_at = Column(UTCDateTime, default=_now, onupdate=_now)

    client = relationship("Client", back_populates="requirements")

    __table_args__ = (
        Index("ix_client_requirements_client", "client_id"),
        Index("ix_client_requirements_created_at", "created_at"),
    )
