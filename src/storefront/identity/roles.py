"""Role assignment — administrators promote or demote other users."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import Forbidden, NotFound
from storefront.identity.access import load_caller
from storefront.identity.user import Role, User

logger = structlog.get_logger(__name__)


@storefront.command(part_of="User")
class AssignRole:
    actor_id: Identifier(required=True)
    user_id: Identifier(required=True)
    role: String(required=True, max_length=20)


@storefront.command_handler(part_of=User)
class AssignRoleHandler:
    @handle(AssignRole)
    def assign_role(self, command):
        actor = load_caller(command.actor_id)
        if actor.role != Role.ADMIN.value:
            raise Forbidden("Only administrators can change roles")

        repo = current_domain.repository_for(User)
        try:
            user = repo.get(command.user_id)
        except ObjectNotFoundError:
            raise NotFound("User not found") from None

        user.assign_role(command.role, assigned_by=actor.id)
        repo.add(user)

        logger.info("Role assigned", user_id=str(user.id), role=user.role, assigned_by=str(actor.id))
        return {"user_id": str(user.id), "role": user.role}
