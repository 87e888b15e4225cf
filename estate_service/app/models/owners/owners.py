from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Owner(Base):
    __tablename__ = "owners"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(255))
    email = Column(String(255))
    address = Column(Text)
    bank_name = Column(String(255))
    bank_account_number = Column(String(255))
    bank_branch = Column(String(255))

    # relationships
    shops = relationship("Shop", back_populates="owner")
    expenses = relationship("Expense", back_populates="owner")
    bank_deposits = relationship("BankDeposit", back_populates="owner")
