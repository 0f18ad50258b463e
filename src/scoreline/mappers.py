"""Decoders from HTTP responses to domain values.

Each mapper either returns a value or raises: ``TransportError`` (with
``status_code``) for a non-200 response, ``DecodingError`` for a bad payload.
The remote loader turns either into a terminal ``Failure``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from scoreline.errors import DecodingError, TransportError
from scoreline.models import Match, Team

if TYPE_CHECKING:
    from scoreline.remote import HTTPResponse

_OK = 200


class _TeamsEnvelope(BaseModel):
    teams: list[Team]


class _MatchGroups(BaseModel):
    previous: list[Match] = Field(default_factory=list)
    upcoming: list[Match] = Field(default_factory=list)


class _MatchesEnvelope(BaseModel):
    matches: _MatchGroups


# The API wraps collections in an envelope; bare arrays are accepted too.
_TEAMS = TypeAdapter(_TeamsEnvelope | list[Team])
_MATCHES = TypeAdapter(_MatchesEnvelope | list[Match])


def _require_ok(response: HTTPResponse) -> None:
    if response.status_code != _OK:
        raise TransportError(
            f"Unexpected HTTP status {response.status_code}",
            hint=f"Only {_OK} responses carry a payload.",
            status_code=response.status_code,
        )


def map_teams(response: HTTPResponse) -> list[Team]:
    """Decode a ``/teams`` response."""
    _require_ok(response)
    try:
        payload = _TEAMS.validate_json(response.body)
    except ValidationError as exc:
        raise DecodingError(
            f"Invalid teams payload: {exc.error_count()} error(s)"
        ) from exc
    return payload.teams if isinstance(payload, _TeamsEnvelope) else payload


def map_matches(response: HTTPResponse) -> list[Match]:
    """Decode a ``/matches`` response, previous matches first."""
    _require_ok(response)
    try:
        payload = _MATCHES.validate_json(response.body)
    except ValidationError as exc:
        raise DecodingError(
            f"Invalid matches payload: {exc.error_count()} error(s)"
        ) from exc
    if isinstance(payload, _MatchesEnvelope):
        return [*payload.matches.previous, *payload.matches.upcoming]
    return payload


def map_logo_data(response: HTTPResponse) -> bytes:
    """Accept a logo response only when it carries bytes."""
    _require_ok(response)
    if not response.body:
        raise DecodingError("Empty logo payload")
    return response.body
