from sqlalchemy import Column, Integer, Date, Numeric, Text, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class RentAdjustment(Base):
    """Append-only rent history; never updated or deleted."""
    __tablename__ = "rent_adjustments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lease_id = Column(Integer, ForeignKey("leases.id"), nullable=False, index=True)
    previous_rent = Column(Numeric(12, 2), nullable=False)
    new_rent = Column(Numeric(12, 2), nullable=False)
    # positive for increase, negative for decrease
    adjustment_amount = Column(Numeric(12, 2), nullable=False)
    effective_date = Column(Date, nullable=False)
    agreement_terms = Column(Text)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(), nullable=False)

    lease = relationship("Lease", back_populates="rent_adjustments")
