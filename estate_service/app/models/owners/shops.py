from sqlalchemy import Boolean, Column, Integer, String, Numeric, Text, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Shop(Base):
    __tablename__ = "shops"

    id = Column(Integer, primary_key=True, autoincrement=True)
    shop_number = Column(String(50), nullable=False)
    floor = Column(String(16), nullable=False)  # ground|first|second|subedari
    square_feet = Column(Numeric(10, 2))
    status = Column(String(16), nullable=False, default="vacant")  # vacant|occupied
    ownership_type = Column(String(16), nullable=False)  # sole|common
    # null when ownership_type is "common"
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=True)
    description = Column(Text)
    is_deleted = Column(Boolean, default=False, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "(ownership_type = 'common' AND owner_id IS NULL) OR "
            "(ownership_type = 'sole' AND owner_id IS NOT NULL)",
            name="ck_shop_ownership_owner",
        ),
    )

    # relationships
    owner = relationship("Owner", back_populates="shops")
    leases = relationship("Lease", back_populates="shop")
