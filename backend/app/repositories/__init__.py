"""Repository package exposing persistence-layer access for every model."""

from __future__ import annotations

from app.repositories.base import BaseRepository
from app.repositories.external_token import ExternalTokenRepository
from app.repositories.quiz_result import QuizResultRepository
from app.repositories.refresh_token import RefreshTokenRepository
from app.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "RefreshTokenRepository",
    "ExternalTokenRepository",
    "QuizResultRepository",
]
