from sqlalchemy import Column, Integer, Date, Numeric, Text, ForeignKey, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class LedgerTransfer(Base):
    """Credit moved from one of a tenant's leases to another at settlement."""
    __tablename__ = "ledger_transfers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    source_lease_id = Column(Integer, ForeignKey("leases.id"), nullable=False, index=True)
    target_lease_id = Column(Integer, ForeignKey("leases.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    transfer_date = Column(Date, nullable=False)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_ledger_transfer_positive"),
        CheckConstraint("source_lease_id <> target_lease_id",
                        name="ck_ledger_transfer_distinct"),
    )

    source_lease = relationship("Lease", foreign_keys=[source_lease_id])
    target_lease = relationship("Lease", foreign_keys=[target_lease_id])
