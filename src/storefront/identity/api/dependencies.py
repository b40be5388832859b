"""Request dependencies resolving the calling ``Actor`` from a bearer token."""

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from storefront.identity.access import Actor
from storefront.identity.user.authentication import authenticate

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


async def current_actor(token: str | None = Depends(oauth2_scheme)) -> Actor:
    return authenticate(token)
