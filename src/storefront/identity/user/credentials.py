"""Password hashing and access token encoding."""

from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from storefront.shared.exceptions import InvalidCredential
from storefront.shared.settings import setting

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(claims: dict) -> str:
    to_encode = claims.copy()
    to_encode["exp"] = datetime.now(UTC) + timedelta(minutes=int(setting("access_token_minutes", 60)))
    return jwt.encode(to_encode, setting("jwt_secret"), algorithm=setting("jwt_algorithm", "HS256"))


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, setting("jwt_secret"), algorithms=[setting("jwt_algorithm", "HS256")])
    except ExpiredSignatureError:
        raise InvalidCredential("Access token has expired") from None
    except JWTError:
        raise InvalidCredential("Access token is invalid") from None
