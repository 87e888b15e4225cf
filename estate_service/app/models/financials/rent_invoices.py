from sqlalchemy import Boolean, Column, Integer, Date, Numeric, ForeignKey, DateTime, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class RentInvoice(Base):
    __tablename__ = "rent_invoices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lease_id = Column(Integer, ForeignKey(
        "leases.id", ondelete="CASCADE"), nullable=False, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    due_date = Column(Date, nullable=False)  # first day of the billed month
    month = Column(Integer, nullable=False)  # 1-12
    year = Column(Integer, nullable=False)
    is_paid = Column(Boolean, default=False, nullable=False)
    paid_amount = Column(Numeric(12, 2), default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("lease_id", "year", "month",
                         name="uq_rent_invoice_lease_month"),
        CheckConstraint("paid_amount <= amount", name="ck_rent_invoice_paid"),
    )

    lease = relationship("Lease", back_populates="invoices")
