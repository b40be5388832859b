"""FastAPI endpoints for the Identity domain."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.identity.access import Actor
from storefront.identity.api.dependencies import current_actor
from storefront.identity.api.schemas import RegisterRequest, StatusResponse, UserResponse
from storefront.identity.user.authentication import AccessToken, Login, login
from storefront.identity.user.management import BlockUser, UnblockUser, list_users
from storefront.identity.user.registration import registration
from storefront.identity.user.user import User

auth_router = APIRouter(prefix="/auth", tags=["auth"])
admin_router = APIRouter(prefix="/admin/users", tags=["admin"])


@auth_router.post("/register", status_code=201, response_model=UserResponse)
async def register(body: RegisterRequest) -> UserResponse:
    command = registration(body.name, body.email, body.password)
    number = current_domain.process(command, asynchronous=False)
    return UserResponse.from_user(current_domain.repository_for(User).get_by_number(number))


@auth_router.post("/login", response_model=AccessToken)
async def issue_token(body: Login) -> AccessToken:
    return login(body)


@admin_router.get("", response_model=list[UserResponse])
async def users(actor: Actor = Depends(current_actor)) -> list[UserResponse]:
    return [UserResponse.from_user(user) for user in list_users(actor)]


@admin_router.put("/{user_id}/block", response_model=StatusResponse)
async def block_user(user_id: int, actor: Actor = Depends(current_actor)) -> StatusResponse:
    current_domain.process(BlockUser(user_id=user_id, **actor.stamp()), asynchronous=False)
    return StatusResponse()


@admin_router.put("/{user_id}/unblock", response_model=StatusResponse)
async def unblock_user(user_id: int, actor: Actor = Depends(current_actor)) -> StatusResponse:
    current_domain.process(UnblockUser(user_id=user_id, **actor.stamp()), asynchronous=False)
    return StatusResponse()
