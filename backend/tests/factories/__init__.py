"""Factory Boy base wired to the per-test SAVEPOINT session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Holder for the session installed by the autouse ``_factories_session`` fixture."""

    _session = None

    @classmethod
    def set(cls, session) -> None:
        cls._session = session

    @classmethod
    def get(cls):
        if cls._session is None:
            raise RuntimeError("Factory session not set; request the 'session' fixture.")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Commit into the per-test SAVEPOINT session; rows vanish with the outer rollback."""

    class Meta:
        abstract = True
        # Resolved lazily on every create, after the fixture has set it.
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "commit"

    @classmethod
    def _after_postgeneration(cls, instance, create, results=None):
        """Flush changes made by post-generation hooks so rows are not left dirty."""
        if create:
            SQLAlchemySession.get().commit()
