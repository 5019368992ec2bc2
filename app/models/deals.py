"""Deal pipeline model.

Deals snapshot the client/supplier/product display fields at creation time
so a deal stays readable after its source rows change or are deleted.
The stage column is closed by a CHECK constraint; every writer runs
services/stage_normalizer.py first.
"""

from sqlalchemy import CheckConstraint, Column, Float, ForeignKey, Index, Integer, String, Text

from ..database import UTCDateTime
from .base import Base
from .crm import _now, _uuid

# Pipeline order matters (kanban columns, stats)
DEAL_STAGES = ("lead", "negotiation", "contract", "closed")


class Deal(Base):
    __tablename__ = "deals"
    id = Column(String(36), primary_key=True, default=_uuid)
    title = Column(String(500))

    # Source references, nullable for manually created deals
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="SET NULL"))
    supplier_id = Column(String(36), ForeignKey("suppliers.id", ondelete="SET NULL"))
    product_id = Column(String(36), ForeignKey("supplier_products.id", ondelete="SET NULL"))
    requirement_id = Column(
        String(36), ForeignKey("client_requirements.id", ondelete="SET NULL")
    )

    # Display snapshot
    client_name = Column(String(255))
    client_contact = Column(String(255))
    supplier_name = Column(String(255))
    supplier_contact = Column(String(255))
    product_name = Column(String(255))
    dosage_form = Column(String(100))
    strength = Column(String(100))
    pack_size = Column(String(100))

    # Commercial
    quantity = Column(Float)
    unit_price_usd = Column(Float)
    total_value_usd = Column(Float)
    currency = Column(String(10), default="USD")
    commission_rate = Column(Float)

    stage = Column(String(20), nullable=False, default="lead")
    priority = Column(String(20))
    probability = Column(Integer)
    expected_close_date = Column(String(50))
    next_action = Column(String(500))
    notes = Column(Text)
    source = Column(String(50), default="manual")  # manual | intelligent_matching
    similarity_score = Column(Integer)

    created_at = Column(UTCDateTime, default=_now)
    updated_at = Column(UTCDateTime, default=_now, onupdate=_now)

    __table_args__ = (
        CheckConstraint(
            "stage IN ('lead', 'negotiation', 'contract', 'closed')",
            name="ck_deals_stage",
        ),
        Index("ix_deals_stage", "stage"),
        Index("ix_deals_created_at", "created_at"),
    )
