"""
Unit tests for SQLAlchemyReadOnlyUnitOfWork.
"""

from __future__ import annotations

import pytest
from app.models.user import User
from app.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from app.uow import SQLAlchemyUnitOfWork as RWuow
from tests.factories.user import UserFactory


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self):
        """
        Ensure that attempting to flush ORM changes inside the RO UoW raises.
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            # Add a transient object; any flush/autoflush must be blocked.
            uow.session.add(UserFactory.build())
            uow.session.flush()
        uow.session.rollback()

    def test_allows_reads(self):
        """
        Read operations should work normally within RO UoW.
        """
        with RWuow() as uow:
            uow.users.add(UserFactory.build(email="reader@x.com"))

        with ROuow() as uow:
            assert uow.users.get_by_email("reader@x.com") is not None
            assert uow.session.query(User).count() >= 1

    def test_disallows_commit(self):
        """
        RO UoW must reject commit() by design.
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_guard_is_removed_on_exit(self):
        """Writes through a RW UoW succeed once the RO scope has closed."""
        with ROuow():
            pass

        with RWuow() as uow:
            uow.users.add(UserFactory.build(email="after@x.com"))

        with ROuow() as uow:
            assert uow.users.exists_by_email("after@x.com")

    def test_exit_keeps_existing_rows(self):
        """Leaving the RO scope must not roll back data written before it."""
        user = UserFactory()

        with ROuow() as uow:
            assert uow.users.get(user.id) is not None

        with ROuow() as uow:
            assert uow.users.get(user.id) is not None
