# app/services/_shared/base.py
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from app.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Timezone-aware wall clock (UTC)."""
    return datetime.now(UTC)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Hold the explicitly injected logger and clock.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    - Collaborators are passed to the constructor; nothing is looked up globally.
    """

    def __init__(
        self, *, logger: logging.Logger | None = None, clock: Clock | None = None
    ) -> None:
        """
        Initialize the base service.

        :param logger: Logger to use; defaults to the subclass module logger.
        :param clock: Callable returning "now" (UTC); injectable for tests.
        """
        self.log = logger or logging.getLogger(type(self).__module__)
        self._clock = clock or system_clock

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork()

    # ----------------------------- Clock ------------------------------------

    def now_utc(self) -> datetime:
        return self._clock()
