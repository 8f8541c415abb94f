"""Identity upsert — the one entry point used by the identity provider.

Called once per sign-in event. Creates the user on first sight of an email,
otherwise refreshes the profile. An existing user is only refreshed through
a provider account already linked to them; any other account presenting the
same email is refused and changes nothing. Running it twice with the same
input leaves the user unchanged apart from the last sign-in timestamp.
"""

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import AccountNotLinked
from storefront.identity.user import User

logger = structlog.get_logger(__name__)


@storefront.command(part_of="User")
class UpsertIdentity:
    email: String(required=True, max_length=254)
    name: String(max_length=255)
    image: String(max_length=500)
    provider: String(max_length=50)
    provider_account_id: String(max_length=255)


@storefront.command_handler(part_of=User)
class UpsertIdentityHandler:
    @handle(UpsertIdentity)
    def upsert_identity(self, command):
        repo = current_domain.repository_for(User)

        user = repo.find_by_email(command.email)
        if user is None:
            user = User.register(email=command.email, name=command.name, image=command.image)
            logger.info("New user registered", user_id=str(user.id), provider=command.provider)
        elif not user.accepts_sign_in_from(command.provider, command.provider_account_id):
            logger.warning("Sign-in refused, account not linked", user_id=str(user.id), provider=command.provider)
            raise AccountNotLinked()
        else:
            user.record_sign_in(name=command.name, image=command.image, provider=command.provider)

        if command.provider and command.provider_account_id:
            if user.link_account(command.provider, command.provider_account_id):
                logger.info("Account linked", user_id=str(user.id), provider=command.provider)

        repo.add(user)
        return {"user_id": str(user.id), "role": user.role}
