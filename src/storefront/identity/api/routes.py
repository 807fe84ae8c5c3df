"""FastAPI endpoints for user accounts. All routes are admin-only."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.identity.api.schemas import CreateUserRequest, UpdateUserRequest, UserResponse
from storefront.identity.auth import require_admin
from storefront.identity.user.management import DeleteUser, RegisterUser, UpdateUser
from storefront.identity.user.user import User
from storefront.shared.api import ApiResponse, MessageResponse

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_admin)])


def _user(user_id: str) -> ApiResponse[UserResponse]:
    return ApiResponse(data=UserResponse.from_user(current_domain.repository_for(User).get(user_id)))


@router.post("", status_code=201, response_model=ApiResponse[UserResponse])
async def create_user(body: CreateUserRequest) -> ApiResponse[UserResponse]:
    command = RegisterUser(
        username=body.username,
        email=body.email,
        password=body.password,
        full_name=body.full_name,
        phone=body.phone,
        role=body.role,
    )
    return _user(current_domain.process(command, asynchronous=False))


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
async def get_user(user_id: str) -> ApiResponse[UserResponse]:
    return _user(user_id)


@router.put("/{user_id}", response_model=ApiResponse[UserResponse])
async def update_user(user_id: str, body: UpdateUserRequest) -> ApiResponse[UserResponse]:
    command = UpdateUser(
        user_id=user_id,
        email=body.email,
        password=body.password,
        full_name=body.full_name,
        phone=body.phone,
        role=body.role,
        is_active=body.is_active,
    )
    return _user(current_domain.process(command, asynchronous=False))


@router.delete("/{user_id}", response_model=ApiResponse[MessageResponse])
async def delete_user(user_id: str) -> ApiResponse[MessageResponse]:
    current_domain.process(DeleteUser(user_id=user_id), asynchronous=False)
    return ApiResponse(data=MessageResponse(message="User deleted"))
