"""Application tests for AssignRole."""

import pytest
from protean import current_domain
from storefront.errors import Forbidden, InvalidRequest, NotFound
from storefront.identity.roles import AssignRole
from storefront.identity.user import User


def _assign(actor_id, user_id, role):
    return current_domain.process(AssignRole(actor_id=actor_id, user_id=user_id, role=role), asynchronous=False)


class TestAssignRole:
    def test_admin_promotes_customer(self, admin, customer):
        result = _assign(admin, customer, "MANAGER")
        assert result == {"user_id": customer, "role": "MANAGER"}
        assert current_domain.repository_for(User).get(customer).role == "MANAGER"

    def test_manager_cannot_assign(self, manager, customer):
        with pytest.raises(Forbidden):
            _assign(manager, customer, "ADMIN")

    def test_customer_cannot_assign(self, customer, other_customer):
        with pytest.raises(Forbidden):
            _assign(customer, other_customer, "MANAGER")

    def test_admin_cannot_change_own_role(self, admin):
        with pytest.raises(Forbidden):
            _assign(admin, admin, "CUSTOMER")

    def test_unknown_user(self, admin):
        with pytest.raises(NotFound):
            _assign(admin, "missing-user", "MANAGER")

    def test_unknown_role(self, admin, customer):
        with pytest.raises(InvalidRequest):
            _assign(admin, customer, "OWNER")
