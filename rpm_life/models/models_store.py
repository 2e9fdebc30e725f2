from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, Integer, String, DateTime, Text, Index
from sqlalchemy.sql import func

Base = declarative_base()

class StoredRecord(Base):
    __tablename__ = "rpm_records"
    pk = Column(Integer, primary_key=True)
    resource = Column(String, nullable=False)     # 'categories'|'calendar-events'|'rpmblocks'
    record_id = Column(String, index=True)
    position = Column(Integer, nullable=False)    # keeps list order stable
    data = Column(Text, nullable=False)           # the record as JSON text
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())
    __table_args__ = (Index('ix_resource_position', 'resource', 'position'),)
