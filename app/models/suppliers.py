"""Supplier models — Suppliers and their product catalogs."""

from sqlalchemy import Column, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from ..database import UTCDateTime
from .base import Base
from .crm import _now, _uuid


class Supplier(Base):
    """Manufacturer or wholesaler we source from. Only active ones are matched."""

    __tablename__ = "suppliers"
    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    country = Column(String(100))
    segment = Column(String(100))
    contact_name = Column(String(255))
    contact_email = Column(String(255))
    contact_phone = Column(String(100))
    website = Column(String(500))
    status = Column(String(20), default="active")  # active | inactive | pending | blocked
    notes = Column(Text)
    created_at = Column(UTCDateTime, default=_now)
    updated_at = Column(UTCDateTime, default=_now, onupdate=_now)

    products = relationship(
        "SupplierProduct", back_populates="supplier", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_suppliers_status", "status"),
        Index("ix_suppliers_created_at", "created_at"),
    )


class SupplierProduct(Base):
    __tablename__ = "supplier_products"
    id = Column(String(36), primary_key=True, default=_uuid)
    supplier_id = Column(
        String(36), ForeignKey("suppliers.id", ondelete="CASCADE"), nullable=False
    )
    api_name = Column(String(255))
    dosage_form = Column(String(100))
    strength = Column(String(100))
    pack_size = Column(String(100))
    unit_price_usd = Column(Float)
    moq = Column(Integer)
    lead_time_days = Column(Integer)
    description = Column(Text)
    created_at = Column(UTCDateTime, default=_now)
    updated_at = Column(UTCDateTime, default=_now, onupdate=_now)

    supplier = relationship("Supplier", back_populates="products")

    __table_args__ = (
        Index("ix_supplier_products_supplier", "supplier_id"),
        Index("ix_supplier_products_created_at", "created_at"),
    )
