"""
app/repositories/business_repository.py

Business membership lookups used to scope every request.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.domain.errors import NoBusinessFoundError
from db.models.business import Business, BusinessMember


class BusinessRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def resolve_active_business_id(self, user_id: uuid.UUID) -> uuid.UUID:
        """
        Return the business of the user's single active membership.
        """

        stmt = (
            select(BusinessMember.business_id)
            .join(Business, Business.id == BusinessMember.business_id)
            .where(
                BusinessMember.user_id == user_id,
                BusinessMember.is_active.is_(True),
                Business.is_active.is_(True),
            )
            .limit(2)
        )
        business_ids = list(self._session.scalars(stmt).all())

        if not business_ids:
            raise NoBusinessFoundError(
                "No business found for this user. Please set up a business first."
            )
        if len(business_ids) > 1:
            raise NoBusinessFoundError(
                "More than one active business found for this user. "
                "Deactivate the extra memberships before continuing."
            )
        return business_ids[0]
