import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.sql import func
from railclaim.core.db import Base

class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    pnr = Column(String(6), nullable=False, index=True)
    tcn = Column(String(12), nullable=False)
    passenger_name = Column(String(255), nullable=False)

    # raw, as printed on the ticket (UK tickets may use letter O)
    train_number = Column(String(8), nullable=False)
    journey_date = Column(Date, nullable=False, index=True)
    origin = Column(String(10), nullable=False)
    destination = Column(String(10), nullable=False)

    train_id = Column(Uuid, ForeignKey("trains.id", ondelete="SET NULL"), nullable=True, index=True)
    # write-once: set when the journey is first classified COMPLETED
    final_delay_minutes = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
