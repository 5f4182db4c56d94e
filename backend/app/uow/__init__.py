"""Unit of Work contract and its SQLAlchemy implementations.

Services open a :class:`SQLAlchemyUnitOfWork` for writes (commit on success,
rollback on error) and a :class:`SQLAlchemyReadOnlyUnitOfWork` for lookups.
"""

from .base import UnitOfWork
from .sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

__all__ = [
    "UnitOfWork",
    "SQLAlchemyUnitOfWork",
    "SQLAlchemyReadOnlyUnitOfWork",
]
