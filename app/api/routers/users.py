from fastapi import APIRouter, Depends

from app.api.deps import get_user_service
from app.services.user_service import UserService
from app.domain.schemas import UserCreate, UserRead, AddressIn

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=UserRead, status_code=201)
def create_user(payload: UserCreate, service: UserService = Depends(get_user_service)):
    return service.create_user(payload)


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    return service.get_user(user_id)


@router.patch("/{user_id}/address", response_model=UserRead)
def update_address(
    user_id: int,
    payload: AddressIn,
    service: UserService = Depends(get_user_service),
):
    return service.update_address(user_id, payload)
