from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String
from app.data.database import Base

class UserModel(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    # kontakt kopiowany do zamowienia w chwili zakupu
    email = Column(String, nullable=True)
    phone = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
