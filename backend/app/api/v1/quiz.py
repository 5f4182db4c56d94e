"""Quiz result endpoints for the authenticated user."""

from __future__ import annotations

from flask import Blueprint, request

from app.api.deps import authenticated_identity, json_response, load_body, require_auth, timing
from app.container import get_services
from app.schemas import QuizDailyQuerySchema, QuizResultOutSchema, QuizSubmitSchema
from app.services.quiz.dto import QuizSubmitIn

bp = Blueprint("quiz", __name__)

submit_schema = QuizSubmitSchema()
daily_query_schema = QuizDailyQuerySchema()
result_schema = QuizResultOutSchema()


@bp.post("/submit")
@require_auth
@timing
def submit():
    data = load_body(submit_schema)
    data.pop("wrong", None)
    identity = authenticated_identity()
    result = get_services().quiz.submit(identity.user_id, QuizSubmitIn(**data))
    return json_response(result_schema.dump(result), status=201)


@bp.get("/daily")
@require_auth
@timing
def daily():
    """Results recorded on ``?date=YYYY-MM-DD`` (UTC), today when omitted; newest first."""

    query = daily_query_schema.load(request.args)
    identity = authenticated_identity()
    service = get_services().quiz
    day = query["date"] or service.now_utc().date()
    results = service.daily(identity.user_id, day)
    return json_response({"date": day.isoformat(), "results": result_schema.dump(results, many=True)})
