"""
Abstract Unit of Work contract shared by the read-write and read-only scopes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.repositories import (
        ExternalTokenRepository,
        QuizResultRepository,
        RefreshTokenRepository,
        UserRepository,
    )


class UnitOfWork(ABC):
    """
    Transactional boundary for one use-case.

    Repositories exposed here share a single session, so a refresh-token
    rotation (delete old row, insert new row) commits or fails as one.
    """

    users: UserRepository
    refresh_tokens: RefreshTokenRepository
    external_tokens: ExternalTokenRepository
    quiz_results: QuizResultRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
