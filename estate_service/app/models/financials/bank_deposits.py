from sqlalchemy import Boolean, Column, Integer, String, Date, Numeric, Text, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class BankDeposit(Base):
    __tablename__ = "bank_deposits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    deposit_date = Column(Date, nullable=False)
    bank_name = Column(String(255), nullable=False)
    deposit_slip_ref = Column(String(255))
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(), nullable=False)

    # soft delete, kept for audit
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime(timezone=True))
    deletion_reason = Column(Text)

    owner = relationship("Owner", back_populates="bank_deposits")
