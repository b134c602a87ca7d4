from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime

from app.data.database import Base


class PaymentIntentModel(Base):
    """Gateway payment order issued for a user's cart, with the amount it was priced at."""

    __tablename__ = "payment_intents"

    id = Column(Integer, primary_key=True)
    intent_id = Column(String, nullable=False, unique=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    cart_id = Column(Integer, ForeignKey("carts.id"), nullable=False)

    # minor units (paise), exactly what the gateway was asked to collect
    amount_minor = Column(Integer, nullable=False)
    currency = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
