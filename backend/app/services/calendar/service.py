# app/services/calendar/service.py
"""
CalendarService
===============

Thin proxy over the provider's calendar REST API, authenticated with the
user's stored provider token (refreshed on read by
:class:`~app.services.external_auth.service.ExternalAuthService`).
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

import requests

from app.services._shared.base import BaseService, Clock
from app.services._shared.errors import CalendarError, NotLinkedError
from app.services.external_auth.service import (
    ExternalAuthService,
    json_body,
    summarize_provider_error,
)

LIST_WINDOW = timedelta(days=90)
MAX_RESULTS = 250


def simplify_event(event: dict[str, Any]) -> dict[str, Any]:
    """Flatten a provider event into the fields the client renders."""
    start = event.get("start") or {}
    end = event.get("end") or {}
    return {
        "id": event.get("id", ""),
        "summary": event.get("summary") or "(No Title)",
        "description": event.get("description", ""),
        "location": event.get("location", ""),
        "start": start.get("dateTime") or start.get("date") or "",
        "end": end.get("dateTime") or end.get("date") or "",
        "htmlLink": event.get("htmlLink", ""),
    }


class CalendarService(BaseService):
    """List/create/update/delete events on the user's primary calendar."""

    def __init__(
        self,
        *,
        external_auth: ExternalAuthService,
        events_url: str,
        timeout: float = 10.0,
        logger: logging.Logger | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(logger=logger, clock=clock)
        self.external_auth = external_auth
        self.events_url = events_url.rstrip("/")
        self.timeout = timeout

    # ------------------------------------------------------------------ #
    # Operations
    # ------------------------------------------------------------------ #

    def list_events(self, user_id: int) -> list[dict[str, Any]]:
        """Events from 90 days ago to 90 days ahead, expanded and ordered by start."""
        now = self.now_utc()
        params = {
            "timeMin": (now - LIST_WINDOW).isoformat().replace("+00:00", "Z"),
            "timeMax": (now + LIST_WINDOW).isoformat().replace("+00:00", "Z"),
            "maxResults": str(MAX_RESULTS),
            "singleEvents": "true",
            "orderBy": "startTime",
        }
        body = self._call(user_id, "GET", self.events_url, params=params, action="list events")
        return [simplify_event(item) for item in body.get("items", [])]

    def create_event(self, user_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        body = self._call(user_id, "POST", self.events_url, json=payload, action="create event")
        return simplify_event(body)

    def update_event(self, user_id: int, event_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Merge ``payload`` into the stored event and write it back.

        The full resource is fetched first and sent with ``PUT``, so fields
        absent from ``payload`` keep their current values.
        """
        url = f"{self.events_url}/{event_id}"
        current = self._call(user_id, "GET", url, action="update event")
        merged = {**current, **payload}
        body = self._call(user_id, "PUT", url, json=merged, action="update event")
        return simplify_event(body)

    def delete_event(self, user_id: int, event_id: str) -> None:
        self._call(user_id, "DELETE", f"{self.events_url}/{event_id}", action="delete event")

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _token(self, user_id: int) -> str:
        token = self.external_auth.get_access_token(user_id)
        if token is None:
            raise NotLinkedError()
        return token

    def _call(self, user_id: int, method: str, url: str, *, action: str, **kwargs: Any) -> dict:
        token = self._token(user_id)
        try:
            resp = self.external_auth.http.request(
                method,
                url,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise CalendarError(f"Failed to {action}: {type(exc).__name__}") from exc

        payload = json_body(resp)
        if not resp.ok:
            self.log.warning(
                "Calendar call failed",
                extra={"user_id": user_id, "provider_status": resp.status_code},
            )
            raise CalendarError(f"Failed to {action}: {summarize_provider_error(resp, payload)}")
        return payload
