from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.payment_intent import PaymentIntentModel


class PaymentIntentRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_intent(self, intent: PaymentIntentModel) -> PaymentIntentModel:
        self.db.add(intent)
        self.db.commit()
        self.db.refresh(intent)
        return intent

    def get_intent(self, intent_id: str) -> PaymentIntentModel | None:
        return self.db.execute(
            select(PaymentIntentModel).where(PaymentIntentModel.intent_id == intent_id)
        ).scalar_one_or_none()

    def is_consumed(self, intent_id: str) -> bool:
        # an intent pays for one order only
        return self.db.execute(
            select(OrderModel.id).where(OrderModel.payment_intent_id == intent_id).limit(1)
        ).first() is not None
