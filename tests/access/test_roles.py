"""Tests for proofledger.access.roles - role ids and the RoleRegistry."""

from __future__ import annotations

import pytest
from eth_utils import keccak

from proofledger.access.roles import (
    DEFAULT_ADMIN_ROLE,
    GOVERNOR_ROLE,
    MINTER_ROLE,
    RoleRegistry,
    role_id,
    role_name,
)
from proofledger.core.events import EventKind, EventLog
from proofledger.core.exceptions import LastAdminRevocation, Unauthorized, ValidationException


@pytest.fixture
def events(deployer):
    return EventLog(deployer)


@pytest.fixture
def roles(events, deployer):
    return RoleRegistry(events, admin=deployer)


class TestRoleIds:
    def test_admin_role_is_zero(self):
        assert DEFAULT_ADMIN_ROLE == b"\x00" * 32

    def test_named_roles_are_keccak_of_name(self):
        assert GOVERNOR_ROLE == keccak(text="GOVERNOR_ROLE")
        assert MINTER_ROLE == role_id("MINTER_ROLE")

    def test_role_name(self):
        assert role_name(GOVERNOR_ROLE) == "GOVERNOR_ROLE"
        assert role_name(b"\x01" * 32) == "0x" + "01" * 32


class TestRoleRegistrySeed:
    """The constructor seeds the admin."""

    def test_admin_seeded(self, roles, deployer):
        assert roles.has_role(DEFAULT_ADMIN_ROLE, deployer)
        assert roles.get_role_members(DEFAULT_ADMIN_ROLE) == [deployer]

    def test_seed_emits_role_granted(self, roles, events, deployer):
        (event,) = events.events(EventKind.ROLE_GRANTED)
        assert event.args == {"role": DEFAULT_ADMIN_ROLE, "account": deployer, "sender": deployer}


class TestGrantRevoke:
    """Test admin-gated grant and revoke."""

    def test_grant(self, roles, events, deployer, alice):
        assert roles.grant_role(deployer, GOVERNOR_ROLE, alice) is True
        assert roles.has_role(GOVERNOR_ROLE, alice)
        assert events.last(EventKind.ROLE_GRANTED).args["account"] == alice

    def test_grant_by_name(self, roles, deployer, alice):
        roles.grant_role(deployer, "GOVERNOR_ROLE", alice)
        assert roles.has_role(GOVERNOR_ROLE, alice)
        assert roles.has_role("0x" + GOVERNOR_ROLE.hex(), alice)

    def test_grant_idempotent(self, roles, events, deployer, alice):
        roles.grant_role(deployer, GOVERNOR_ROLE, alice)
        before = len(events)

        assert roles.grant_role(deployer, GOVERNOR_ROLE, alice) is False
        assert len(events) == before
        assert roles.get_role_member_count(GOVERNOR_ROLE) == 1

    def test_grant_requires_admin(self, roles, alice, bob):
        with pytest.raises(Unauthorized) as exc_info:
            roles.grant_role(alice, GOVERNOR_ROLE, bob)
        assert exc_info.value.role == "DEFAULT_ADMIN_ROLE"
        assert not roles.has_role(GOVERNOR_ROLE, bob)

    def test_revoke(self, roles, events, deployer, alice):
        roles.grant_role(deployer, GOVERNOR_ROLE, alice)

        assert roles.revoke_role(deployer, GOVERNOR_ROLE, alice) is True
        assert not roles.has_role(GOVERNOR_ROLE, alice)
        assert events.last(EventKind.ROLE_REVOKED).args["account"] == alice

    def test_revoke_absent_is_noop(self, roles, deployer, alice):
        assert roles.revoke_role(deployer, GOVERNOR_ROLE, alice) is False

    def test_revoke_requires_admin(self, roles, deployer, alice):
        roles.grant_role(deployer, GOVERNOR_ROLE, alice)
        with pytest.raises(Unauthorized):
            roles.revoke_role(alice, GOVERNOR_ROLE, alice)

    def test_require_role(self, roles, deployer, alice):
        roles.require_role(deployer, DEFAULT_ADMIN_ROLE)
        with pytest.raises(Unauthorized):
            roles.require_role(alice, GOVERNOR_ROLE)

    def test_unknown_role_name_rejected(self, roles, deployer, alice):
        with pytest.raises(ValidationException):
            roles.grant_role(deployer, "NOT_A_ROLE", alice)
        with pytest.raises(ValidationException):
            roles.has_role(b"\x01" * 8, alice)


class TestLastAdmin:
    """The admin role is never left empty."""

    def test_revoke_last_admin_rejected(self, roles, deployer):
        with pytest.raises(LastAdminRevocation):
            roles.revoke_role(deployer, DEFAULT_ADMIN_ROLE, deployer)
        assert roles.has_role(DEFAULT_ADMIN_ROLE, deployer)

    def test_renounce_last_admin_rejected(self, roles, deployer):
        with pytest.raises(LastAdminRevocation):
            roles.renounce_role(deployer, DEFAULT_ADMIN_ROLE)

    def test_admin_handover(self, roles, deployer, alice):
        roles.grant_role(deployer, DEFAULT_ADMIN_ROLE, alice)

        assert roles.renounce_role(deployer, DEFAULT_ADMIN_ROLE) is True
        assert roles.get_role_members(DEFAULT_ADMIN_ROLE) == [alice]
        with pytest.raises(Unauthorized):
            roles.grant_role(deployer, GOVERNOR_ROLE, deployer)

    def test_renounce_other_role(self, roles, deployer, alice):
        roles.grant_role(deployer, GOVERNOR_ROLE, alice)
        assert roles.renounce_role(alice, GOVERNOR_ROLE) is True
        assert not roles.has_role(GOVERNOR_ROLE, alice)
