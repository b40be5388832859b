"""Administrative user management — listing, blocking and unblocking."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.access import Actor, actor_of, require_admin
from storefront.identity.user.user import Role, User

logger = structlog.get_logger(__name__)


@storefront.command(part_of="User")
class BlockUser:
    user_id: Integer(required=True)
    actor_id: Integer(required=True)
    actor_role: String(required=True, choices=Role)


@storefront.command(part_of="User")
class UnblockUser:
    user_id: Integer(required=True)
    actor_id: Integer(required=True)
    actor_role: String(required=True, choices=Role)


@storefront.command_handler(part_of=User)
class UserManagementHandler:
    @handle(BlockUser)
    def block_user(self, command):
        actor = actor_of(command)
        require_admin(actor, "block users")
        if actor.actor_id == command.user_id:
            raise ValidationError({"user_id": ["Administrators cannot block themselves"]})

        repo = current_domain.repository_for(User)
        user = repo.get_by_number(command.user_id)
        user.block()
        repo.add(user)

        logger.info("User blocked", user_id=command.user_id, blocked_by=actor.actor_id)

    @handle(UnblockUser)
    def unblock_user(self, command):
        actor = actor_of(command)
        require_admin(actor, "unblock users")

        repo = current_domain.repository_for(User)
        user = repo.get_by_number(command.user_id)
        user.unblock()
        repo.add(user)

        logger.info("User unblocked", user_id=command.user_id, unblocked_by=actor.actor_id)


def list_users(actor: Actor) -> list[User]:
    require_admin(actor, "list users")
    return current_domain.repository_for(User).everyone()
