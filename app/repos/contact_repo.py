from sqlalchemy.orm import Session
from app.data.models.contact_message import ContactMessageModel


class ContactRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_message(self, message: ContactMessageModel) -> ContactMessageModel:
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message
