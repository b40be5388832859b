"""Repository for the User aggregate, looked up by public number or email."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.identity.user.user import User


@storefront.repository(part_of=User)
class UserRepository:
    def find_by_number(self, number: int) -> User | None:
        users = self._dao.query.filter(number=number).all().items
        return users[0] if users else None

    def get_by_number(self, number: int) -> User:
        user = self.find_by_number(number)
        if user is None:
            raise ObjectNotFoundError(f"User {number} not found")
        return user

    def find_by_email(self, email: str) -> User | None:
        users = self._dao.query.filter(email=email.strip().lower()).all().items
        return users[0] if users else None

    def everyone(self) -> list[User]:
        return self._dao.query.order_by("number").limit(None).all().items
