from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.user import UserModel
from app.domain.errors import ConflictError, NotFoundError
from app.domain.schemas import UserCreate, UserRead, AddressIn, AddressOut
from app.repos.user_repo import UserRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


def to_user_read(user: UserModel) -> UserRead:
    return UserRead(
        id=user.id,
        name=user.name,
        email=user.email,
        phone_number=user.phone_number,
        address=AddressOut(street=user.street, city=user.city, postal_code=user.postal_code),
    )


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        email = payload.email.lower()
        if self.repo.get_user_by_email(email):
            raise ConflictError("User already exists with this email")

        address = payload.address
        user = UserModel(
            name=payload.name,
            email=email,
            phone_number=payload.phone_number,
            street=address.street if address else None,
            city=address.city if address else None,
            postal_code=address.postal_code if address else None,
        )
        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            self.repo.db.rollback()
            raise ConflictError("User already exists with this email")

        logger.info(f"User {created.id} registered")
        return to_user_read(created)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return to_user_read(user)

    def update_address(self, user_id: int, address: AddressIn) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")

        user.street = address.street
        user.city = address.city
        user.postal_code = address.postal_code
        return to_user_read(self.repo.save(user))
