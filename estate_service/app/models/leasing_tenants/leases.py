from sqlalchemy import Column, Integer, String, Date, Numeric, Text, ForeignKey, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class Lease(Base):
    __tablename__ = "leases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    monthly_rent = Column(Numeric(12, 2), nullable=False)
    security_deposit = Column(Numeric(12, 2), nullable=False, default=0)
    security_deposit_used = Column(Numeric(12, 2), nullable=False, default=0)
    # per-lease debt carried in from before the system
    opening_due_balance = Column(Numeric(12, 2), nullable=False, default=0)

    # active|expiring_soon|expired|terminated
    status = Column(String(16), nullable=False, default="active")
    notes = Column(Text)
    termination_notes = Column(Text)
    terminated_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("security_deposit_used <= security_deposit",
                        name="ck_lease_deposit_used"),
    )

    # relationships
    tenant = relationship("Tenant", back_populates="leases")
    shop = relationship("Shop", back_populates="leases")
    invoices = relationship(
        "RentInvoice", back_populates="lease", cascade="all, delete-orphan")
    rent_adjustments = relationship("RentAdjustment", back_populates="lease")
    payments = relationship("Payment", back_populates="lease")
