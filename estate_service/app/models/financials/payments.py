from sqlalchemy import Boolean, Column, Integer, String, Date, Numeric, Text, ForeignKey, DateTime, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    lease_id = Column(Integer, ForeignKey("leases.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_date = Column(Date, nullable=False)
    # ["2024-01", "2024-02"] when the tenant named the months paid for
    rent_months = Column(JSON().with_variant(JSONB, "postgresql"))
    receipt_number = Column(String(255))
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(), nullable=False)

    # soft delete, kept for audit
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime(timezone=True))
    deletion_reason = Column(Text)

    tenant = relationship("Tenant", back_populates="payments")
    lease = relationship("Lease", back_populates="payments")
