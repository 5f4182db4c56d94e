"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    CalendarEventSchema,
    ExternalLoginSchema,
    LogoutSchema,
    PasswordUpdateSchema,
    RefreshSchema,
    SigninSchema,
    SignupSchema,
    TokenBundleSchema,
    UserOutSchema,
)
from .quiz import QuizDailyQuerySchema, QuizResultOutSchema, QuizSubmitSchema

__all__ = [
    "SignupSchema",
    "SigninSchema",
    "RefreshSchema",
    "LogoutSchema",
    "PasswordUpdateSchema",
    "UserOutSchema",
    "TokenBundleSchema",
    "ExternalLoginSchema",
    "CalendarEventSchema",
    "QuizSubmitSchema",
    "QuizDailyQuerySchema",
    "QuizResultOutSchema",
]
