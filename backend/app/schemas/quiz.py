"""Marshmallow schemas for quiz submission and the daily listing."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

_points = validate.Range(min=0)


class QuizSubmitSchema(Schema):
    """Body of ``POST /quiz/submit``; the legacy ``wrong`` list is accepted and ignored."""

    class Meta:
        unknown = EXCLUDE

    topic = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=200))
    score = fields.Integer(required=True, strict=True, validate=_points)
    max_score = fields.Integer(
        load_default=None, allow_none=True, strict=True, validate=_points, data_key="maxScore"
    )
    wrong = fields.List(fields.String(), load_default=None, allow_none=True, load_only=True)


class QuizDailyQuerySchema(Schema):
    """Query string of ``GET /quiz/daily`` (``date=YYYY-MM-DD``, optional)."""

    class Meta:
        unknown = EXCLUDE

    date = fields.Date(load_default=None, allow_none=True, format="%Y-%m-%d")


class QuizResultOutSchema(Schema):
    id = fields.Integer()
    topic = fields.String()
    score = fields.Integer()
    max_score = fields.Integer(data_key="maxScore")
    percentage = fields.Float()
    created_at = fields.DateTime(data_key="createdAt")
