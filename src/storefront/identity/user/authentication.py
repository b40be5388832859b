"""Login and token authentication.

``login`` exchanges an email/password pair for a signed access token.
``authenticate`` turns a token back into an ``Actor``; the user record is
re-read on every call so a block takes effect immediately, even for tokens
issued before it.
"""

import structlog
from protean.utils.globals import current_domain
from pydantic import BaseModel, ConfigDict

from storefront.identity.access import Actor
from storefront.identity.user.credentials import create_access_token, decode_access_token, verify_password
from storefront.identity.user.user import Role, User
from storefront.shared.exceptions import AccountBlocked, InvalidCredential, Unauthenticated

logger = structlog.get_logger(__name__)


class Login(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: str
    password: str


class AccessToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    role: str


def login(command: Login) -> AccessToken:
    user = current_domain.repository_for(User).find_by_email(command.email)
    if user is None or not verify_password(command.password, user.password_hash):
        logger.info("Login rejected", email=command.email)
        raise InvalidCredential("Wrong email or password")
    if user.is_blocked:
        logger.info("Login rejected for blocked account", user_id=user.number)
        raise AccountBlocked()

    token = create_access_token({"sub": str(user.number), "email": user.email, "role": user.role})
    return AccessToken(access_token=token, user_id=user.number, role=user.role)


def authenticate(token: str | None) -> Actor:
    if not token:
        raise Unauthenticated()

    claims = decode_access_token(token)
    try:
        user_number = int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        raise InvalidCredential("Access token is invalid") from None

    user = current_domain.repository_for(User).find_by_number(user_number)
    if user is None:
        raise InvalidCredential("Account no longer exists")
    if user.is_blocked:
        raise AccountBlocked()

    return actor_for(user)


def actor_for(user: User) -> Actor:
    return Actor(actor_id=user.number, role=Role(user.role), email=user.email)
