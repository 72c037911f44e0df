import uuid
from sqlalchemy import Column, Date, DateTime, Integer, String, Uuid
from sqlalchemy.sql import func
from railclaim.core.db import Base

class Train(Base):
    __tablename__ = "trains"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # "<normalized train number>-<MMDD>", e.g. "9007-0105"
    trip_id = Column(String(20), nullable=False, unique=True)
    train_number = Column(String(8), nullable=False, index=True)
    service_date = Column(Date, nullable=False, index=True)

    scheduled_departure = Column(DateTime(timezone=True), nullable=False)
    scheduled_arrival = Column(DateTime(timezone=True), nullable=False)
    actual_arrival = Column(DateTime(timezone=True), nullable=True)
    delay_minutes = Column(Integer, nullable=True)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
