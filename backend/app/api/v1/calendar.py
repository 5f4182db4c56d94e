"""Calendar proxy endpoints backed by the linked provider account."""

from __future__ import annotations

from flask import Blueprint

from app.api.deps import authenticated_identity, json_response, load_body, require_auth, timing
from app.container import get_services
from app.schemas import CalendarEventSchema

bp = Blueprint("calendar", __name__)

event_schema = CalendarEventSchema()
event_patch_schema = CalendarEventSchema(partial=True)


@bp.get("/events")
@require_auth
@timing
def list_events():
    identity = authenticated_identity()
    events = get_services().require_calendar().list_events(identity.user_id)
    return json_response(events)


@bp.post("/events")
@require_auth
@timing
def create_event():
    payload = load_body(event_schema)
    identity = authenticated_identity()
    event = get_services().require_calendar().create_event(identity.user_id, payload)
    return json_response(event, status=201)


@bp.put("/events/<event_id>")
@require_auth
@timing
def update_event(event_id: str):
    """Merge the body into the stored event (absent fields are kept)."""

    payload = load_body(event_patch_schema)
    identity = authenticated_identity()
    event = get_services().require_calendar().update_event(identity.user_id, event_id, payload)
    return json_response(event)


@bp.delete("/events/<event_id>")
@require_auth
@timing
def delete_event(event_id: str):
    identity = authenticated_identity()
    get_services().require_calendar().delete_event(identity.user_id, event_id)
    return json_response({"message": "Event deleted successfully"})
