from sqlalchemy.orm import Session

from app.data.models.contact_message import ContactMessageModel
from app.domain.schemas import ContactMessageIn, BulkOrderIn
from app.repos.contact_repo import ContactRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

CONTACT_US = "contactUs"
BULK_ORDER = "bulkOrder"


class ContactService:
    def __init__(self, db: Session):
        self.repo = ContactRepo(db)

    def save_contact_message(self, payload: ContactMessageIn) -> ContactMessageModel:
        msg = self.repo.create_message(
            ContactMessageModel(**payload.model_dump(), type=CONTACT_US)
        )
        logger.info(f"Contact message {msg.id} saved")
        return msg

    def save_bulk_order(self, payload: BulkOrderIn) -> ContactMessageModel:
        # bulk enquiries share the inbox table, organisation/requirements map onto category/description
        msg = self.repo.create_message(
            ContactMessageModel(
                name=payload.name,
                email=payload.email,
                mobile=payload.mobile,
                pincode=payload.pincode,
                category=payload.organisation,
                description=payload.requirements,
                type=BULK_ORDER,
            )
        )
        logger.info(f"Bulk order enquiry {msg.id} saved")
        return msg
