"""Domain models served by the remote API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Team(BaseModel):
    """A team and the URL of its logo."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    logo: str


class Match(BaseModel):
    """A fixture between two teams.

    ``winner`` and ``highlights`` are only present once the match is played.
    """

    model_config = ConfigDict(frozen=True)

    date: datetime
    description: str
    home: str
    away: str
    winner: str | None = None
    highlights: str | None = None

    @property
    def is_played(self) -> bool:
        return self.winner is not None
