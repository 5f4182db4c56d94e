"""Token-lifecycle and authentication backend.

Exposes :func:`app.factory.create_app` at package level so callers (gunicorn,
``flask --app app``) can ``from app import create_app``.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
