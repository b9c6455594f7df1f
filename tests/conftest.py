"""
tests/conftest.py

In-memory stand-ins for the SQLAlchemy repositories. No database is used
anywhere in the test suite.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any

import pytest

from app.domain.errors import DiscountRuleNotFoundError, RecordPersistenceError
from app.domain.imports import EntityRecord, RowFailure


class FakeImportLogStore:
    def __init__(self) -> None:
        self.runs: dict[uuid.UUID, dict[str, Any]] = {}
        self.row_errors: dict[uuid.UUID, list[RowFailure]] = {}
        self.finalize_calls = 0

    def create_run(self, **kwargs: Any) -> uuid.UUID:
        run_id = uuid.uuid4()
        self.runs[run_id] = {
            **kwargs,
            "id": run_id,
            "status": "processing",
            "successful_rows": 0,
            "failed_rows": 0,
            "completed_at": None,
        }
        self.row_errors[run_id] = []
        return run_id

    def finalize_run(
        self,
        *,
        run_id: uuid.UUID,
        status: str,
        successful_rows: int,
        failed_rows: int,
    ) -> None:
        self.finalize_calls += 1
        self.runs[run_id].update(
            status=status,
            successful_rows=successful_rows,
            failed_rows=failed_rows,
            completed_at=datetime.now(timezone.utc),
        )

    def add_row_errors(self, *, run_id: uuid.UUID, failures: Sequence[RowFailure]) -> int:
        self.row_errors[run_id].extend(failures)
        return len(failures)

    @property
    def only_run(self) -> dict[str, Any]:
        assert len(self.runs) == 1
        return next(iter(self.runs.values()))

    @property
    def only_run_errors(self) -> list[RowFailure]:
        assert len(self.row_errors) == 1
        return next(iter(self.row_errors.values()))


class FakeRecordStore:
    """
    Rejects any record whose ``name`` (or ``customer_name``) is listed in
    ``fail_names``, the way a unique constraint would.
    """

    def __init__(self, fail_names: set[str] | None = None) -> None:
        self.fail_names = fail_names or set()
        self.inserted: list[EntityRecord] = []
        self.insert_many_calls = 0

    def insert_one(self, record: EntityRecord) -> None:
        self._check(record)
        self.inserted.append(record)

    def insert_many(self, records: Sequence[EntityRecord]) -> int:
        self.insert_many_calls += 1
        for record in records:
            self._check(record)
        self.inserted.extend(records)
        return len(records)

    def _check(self, record: EntityRecord) -> None:
        name = getattr(record, "name", None) or getattr(record, "customer_name", None)
        if name in self.fail_names:
            raise RecordPersistenceError(f'Database error: duplicate key value for "{name}"')


class FakeDiscountRuleRepository:
    def __init__(self) -> None:
        self.rules: dict[uuid.UUID, SimpleNamespace] = {}

    def create(self, *, business_id: uuid.UUID, **fields: Any) -> SimpleNamespace:
        rule = SimpleNamespace(
            id=uuid.uuid4(),
            business_id=business_id,
            created_at=datetime.now(timezone.utc),
            **fields,
        )
        self.rules[rule.id] = rule
        return rule

    def list_active(self, *, business_id: uuid.UUID) -> list[SimpleNamespace]:
        rules = [
            rule for rule in self.rules.values()
            if rule.business_id == business_id and rule.is_active
        ]
        return sorted(rules, key=lambda rule: rule.created_at, reverse=True)

    def get(self, *, business_id: uuid.UUID, rule_id: uuid.UUID) -> SimpleNamespace:
        rule = self.rules.get(rule_id)
        if rule is None or rule.business_id != business_id:
            raise DiscountRuleNotFoundError(f"Discount rule not found: {rule_id}")
        return rule

    def update(
        self,
        *,
        business_id: uuid.UUID,
        rule_id: uuid.UUID,
        changes: dict[str, Any],
    ) -> SimpleNamespace:
        rule = self.get(business_id=business_id, rule_id=rule_id)
        for key, value in changes.items():
            setattr(rule, key, value)
        return rule

    def delete(self, *, business_id: uuid.UUID, rule_id: uuid.UUID) -> None:
        self.get(business_id=business_id, rule_id=rule_id)
        del self.rules[rule_id]


class StubMembershipSession:
    """
    Answers the active-membership query with a fixed list of business ids.
    """

    def __init__(self, business_ids: Sequence[uuid.UUID]) -> None:
        self.business_ids = list(business_ids)
        self.statements: list[Any] = []

    def scalars(self, statement: Any) -> SimpleNamespace:
        self.statements.append(statement)
        return SimpleNamespace(all=lambda: list(self.business_ids))


@pytest.fixture()
def import_log_store() -> FakeImportLogStore:
    return FakeImportLogStore()


@pytest.fixture()
def record_store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture()
def discount_rule_repository() -> FakeDiscountRuleRepository:
    return FakeDiscountRuleRepository()


@pytest.fixture()
def business_id() -> uuid.UUID:
    return uuid.UUID("11111111-1111-1111-1111-111111111111")


@pytest.fixture()
def user_id() -> uuid.UUID:
    return uuid.UUID("22222222-2222-2222-2222-222222222222")


@pytest.fixture()
def membership_session():
    return StubMembershipSession
