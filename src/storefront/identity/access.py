"""Access guard consumed by every other context.

An ``Actor`` is the authenticated caller: who they are and which role they
hold. Commands carry the caller as ``actor_id``/``actor_role`` and their
handlers check it with ``require_admin`` or ``require_self_or_admin``.
Cross-identity access always fails with ``PermissionDenied`` so that callers
cannot learn whether another user's data exists.
"""

from pydantic import BaseModel, ConfigDict

from storefront.identity.user.user import Role
from storefront.shared.exceptions import PermissionDenied


class Actor(BaseModel):
    model_config = ConfigDict(frozen=True)

    actor_id: int
    role: Role
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def stamp(self) -> dict:
        """Fields to pass into a command issued on behalf of this actor."""
        return {"actor_id": self.actor_id, "actor_role": self.role.value}


def actor_of(command) -> Actor:
    return Actor(actor_id=command.actor_id, role=Role(command.actor_role))


def require_admin(actor: Actor, action: str = "perform this action") -> None:
    if not actor.is_admin:
        raise PermissionDenied(f"Only administrators may {action}", actor_id=actor.actor_id)


def require_self_or_admin(actor: Actor, user_id: int) -> None:
    if not actor.is_admin and actor.actor_id != user_id:
        raise PermissionDenied("You may only access your own records", actor_id=actor.actor_id)
