"""Repository for the User aggregate."""

from storefront.domain import storefront
from storefront.identity.user import User, normalize_email


@storefront.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email) -> User | None:
        results = self._dao.query.filter(email=normalize_email(email)).all().items
        return results[0] if results else None
