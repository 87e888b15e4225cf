from sqlalchemy import Boolean, Column, Integer, String, Date, Numeric, Text, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    expense_type = Column(String(16), nullable=False)  # guard|cleaner|electricity|maintenance|other
    description = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    expense_date = Column(Date, nullable=False)
    allocation = Column(String(16), nullable=False)  # owner|common
    # null for common expenses
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=True)
    receipt_ref = Column(String(255))
    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(), nullable=False)

    # soft delete, kept for audit
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime(timezone=True))
    deletion_reason = Column(Text)

    owner = relationship("Owner", back_populates="expenses")
