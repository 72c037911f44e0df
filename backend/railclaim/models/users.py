import uuid
from sqlalchemy import Column, DateTime, String, Uuid
from sqlalchemy.sql import func
from railclaim.core.db import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
