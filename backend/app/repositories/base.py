"""Generic repository base for SQLAlchemy 2.x.

This module centralizes persistence-only concerns shared by all repositories:

- Primary-key lookups and simple equality filters.
- Add/delete/flush helpers.
- No business logic, no commit/rollback — Services own transactions.

Design decisions
----------------
* Repositories MUST remain thin and persistence-focused:
  - They never implement use cases or domain policies.
  - They never call commit/rollback; the Unit of Work does.
* Entities reference each other by id only; repositories never navigate
  relationships implicitly.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, cast

from sqlalchemy import select
from sqlalchemy.orm import InstrumentedAttribute, Session

from app.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define ``model``: the SQLAlchemy mapped class.
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Initialise the repository with an optional SQLAlchemy session.

        :param session: Session to use; defaults to the Flask-scoped session.
        :type session: Session | None
        """
        self._session = session

    @property
    def session(self) -> Session:
        """Return the active SQLAlchemy session."""
        return self._session or cast(Session, db.session)

    def _pk_attr(self) -> InstrumentedAttribute[Any]:
        return cast(InstrumentedAttribute[Any], getattr(self.model, "id"))

    # ------------------------------ CRUD ------------------------------

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so generated keys are available.

        :param instance: Transient entity.
        :returns: The same, now persistent, instance.
        """
        self.session.add(instance)
        self.session.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Fetch an entity by primary key.

        :param entity_id: Primary key value.
        :returns: Entity or ``None`` when missing.
        """
        stmt = select(self.model).where(self._pk_attr() == entity_id)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def find_one(self, **filters: Any) -> E | None:
        """Return the first entity matching equality ``filters``."""
        stmt = select(self.model).filter_by(**filters)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def exists(self, **filters: Any) -> bool:
        """Return ``True`` when at least one row matches ``filters``."""
        stmt = select(self._pk_attr()).filter_by(**filters).limit(1)
        return self.session.execute(stmt).first() is not None

    def delete(self, instance: E) -> None:
        """Mark ``instance`` for deletion (flushed at the UoW boundary)."""
        self.session.delete(instance)

    def flush(self) -> None:
        """Flush pending changes without committing."""
        self.session.flush()
