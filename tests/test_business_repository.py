"""
tests/test_business_repository.py

Active business resolution against a stubbed session.
"""

from __future__ import annotations

import uuid

import pytest

from app.domain.errors import NoBusinessFoundError
from app.repositories.business_repository import BusinessRepository


class TestResolveActiveBusinessId:
    def test_single_membership(self, membership_session, business_id, user_id) -> None:
        session = membership_session([business_id])

        assert BusinessRepository(session).resolve_active_business_id(user_id) == business_id
        assert len(session.statements) == 1

    def test_no_membership(self, membership_session, user_id) -> None:
        repository = BusinessRepository(membership_session([]))

        with pytest.raises(NoBusinessFoundError, match="Please set up a business first"):
            repository.resolve_active_business_id(user_id)

    def test_several_memberships_are_ambiguous(self, membership_session, user_id) -> None:
        repository = BusinessRepository(membership_session([uuid.uuid4(), uuid.uuid4()]))

        with pytest.raises(NoBusinessFoundError, match="More than one active business"):
            repository.resolve_active_business_id(user_id)

    def test_query_filters_on_user_and_active_flags(self, membership_session, business_id, user_id) -> None:
        session = membership_session([business_id])
        BusinessRepository(session).resolve_active_business_id(user_id)

        sql = str(session.statements[0])
        assert "business_members.user_id" in sql
        assert "business_members.is_active" in sql
        assert "businesses.is_active" in sql
