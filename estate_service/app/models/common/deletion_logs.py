from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from shared.core.database import Base


class DeletionLog(Base):
    __tablename__ = "deletion_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    record_type = Column(String(32), nullable=False)  # payment|bank_deposit|expense
    record_id = Column(Integer, nullable=False)
    # snapshot of the record at deletion time
    record_details = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False)
    reason = Column(Text, nullable=False)
    deleted_at = Column(DateTime(timezone=True),
                        server_default=func.now(), nullable=False)
