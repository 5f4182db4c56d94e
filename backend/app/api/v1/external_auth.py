"""External OAuth endpoints: consent URL, login callback and provider token."""

from __future__ import annotations

from flask import Blueprint, request

from app.api.deps import authenticated_identity, json_response, require_auth, timing
from app.container import get_services
from app.core.errors import to_api_error
from app.schemas import ExternalLoginSchema
from app.services._shared.errors import NotLinkedError

bp = Blueprint("external_auth", __name__)

login_schema = ExternalLoginSchema()


@bp.get("/url")
@timing
def authorization_url():
    """Return the provider consent-screen URL."""

    url = get_services().require_external_auth().build_authorization_url()
    return json_response({"url": url})


@bp.get("/callback")
@timing
def callback():
    """Exchange the authorization code and open a first-party session."""

    service = get_services().require_external_auth()
    result = service.complete_login(request.args.get("code"))
    if not result.ok:
        raise to_api_error(result.error)
    return json_response(login_schema.dump(result.value))


@bp.get("/token")
@require_auth
@timing
def provider_token():
    """Return a usable provider access token, refreshing it when expired."""

    identity = authenticated_identity()
    token = get_services().require_external_auth().get_access_token(identity.user_id)
    if token is None:
        raise NotLinkedError()
    return json_response({"accessToken": token})
