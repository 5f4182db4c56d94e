from app.models.external_token import ExternalToken
from app.models.quiz_result import QuizResult
from app.models.refresh_token import RefreshToken
from app.models.user import Role, User

__all__ = [
    "ExternalToken",
    "QuizResult",
    "RefreshToken",
    "Role",
    "User",
]
