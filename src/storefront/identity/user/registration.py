"""User registration — command and handler.

Raw sign-up input is checked by ``registration`` before a command exists;
the command carries the password hash only, never the password.
"""

import re

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user.credentials import hash_password
from storefront.identity.user.user import Role, User
from storefront.shared.sequence import Counter

logger = structlog.get_logger(__name__)

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128


@storefront.command(part_of="User")
class RegisterUser:
    name: String(required=True, max_length=255)
    email: String(required=True, max_length=254)
    password_hash: String(required=True, max_length=255)
    role: String(max_length=20, choices=Role, default=Role.CUSTOMER.value)


def registration(name: str, email: str, password: str, role: Role = Role.CUSTOMER) -> RegisterUser:
    """Validate sign-up input and build the ``RegisterUser`` command."""
    name = (name or "").strip()
    email = (email or "").strip().lower()
    password = password or ""

    problems = {}
    if not name:
        problems["name"] = ["is required"]
    if len(email) > 254 or not _EMAIL_PATTERN.match(email):
        problems["email"] = ["Invalid email address"]
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        problems["password"] = [
            f"Password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters"
        ]
    if problems:
        raise ValidationError(problems)

    return RegisterUser(name=name, email=email, password_hash=hash_password(password), role=Role(role).value)


@storefront.command_handler(part_of=User)
class RegistrationHandler:
    @handle(RegisterUser)
    def register(self, command):
        repo = current_domain.repository_for(User)
        if repo.find_by_email(command.email) is not None:
            raise ValidationError({"email": ["Email is already registered"]})

        user = User.register(
            number=current_domain.repository_for(Counter).next_value("users"),
            name=command.name,
            email=command.email,
            password_hash=command.password_hash,
            role=command.role,
        )
        repo.add(user)

        logger.info("User registered", user_id=user.number, role=user.role)
        return user.number
