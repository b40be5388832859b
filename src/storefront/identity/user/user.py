"""User aggregate — account, role and blocked flag."""

from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Integer, String

from storefront.domain import storefront
from storefront.shared.clock import utc_now


class Role(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


@storefront.aggregate
class User:
    number: Integer(required=True, unique=True)
    name: String(required=True, max_length=255)
    email: String(required=True, max_length=254, unique=True)
    password_hash: String(required=True, max_length=255)
    role: String(max_length=20, choices=Role, default=Role.CUSTOMER.value)
    is_blocked: Boolean(default=False)
    created_at: DateTime(default=utc_now)

    @classmethod
    def register(cls, number, name, email, password_hash, role=Role.CUSTOMER.value):
        return cls(
            number=number,
            name=name,
            email=email.strip().lower(),
            password_hash=password_hash,
            role=Role(role).value,
            is_blocked=False,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def block(self):
        if self.is_blocked:
            raise ValidationError({"is_blocked": ["User is already blocked"]})
        self.is_blocked = True

    def unblock(self):
        if not self.is_blocked:
            raise ValidationError({"is_blocked": ["User is not blocked"]})
        self.is_blocked = False
