from sqlalchemy import Column, Integer, String, Text, DateTime
from datetime import datetime, timezone

from app.data.database import Base


class ContactMessageModel(Base):
    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    mobile = Column(String, nullable=False)
    category = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    pincode = Column(String, nullable=False)
    type = Column(String, nullable=False)  # contactUs | bulkOrder
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
