"""
Friend Finder: Data Models.

Persisted records (Profile, ChatMessage, ActivityPlan) are pydantic models:
they are the JSON contract of the key-value store. JSON keys keep the
camelCase names the mobile client has always written (fromMe, imageUri,
createdAt, type), so existing on-device data keeps loading.

In-memory values that are never persisted on their own are dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ThemeMode(Enum):
    LIGHT = "light"
    DARK = "dark"


@dataclass(frozen=True)
class ThemeTokens:
    """Fixed color set resolved from a ThemeMode."""

    background: str
    surface: str
    text: str
    muted: str
    accent: str


class MessageKind(Enum):
    MESSAGE = "message"
    PROPOSAL = "proposal"


# ---------------------------------------------------------------------------
# Persisted records
# ---------------------------------------------------------------------------


class Profile(BaseModel):
    """The single local user profile.

    JSON example:
    {
        "name": "Ida",
        "birthdate": "1998-04-02",
        "age": 28,
        "gender": "Kvinde",
        "interests": ["Musik", "Yoga"],
        "imageUri": null
    }
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    birthdate: str | None = None    # YYYY-MM-DD
    age: int | None = None          # derived from birthdate at save time
    gender: str | None = None
    interests: list[str] = Field(default_factory=list)
    image_uri: str | None = Field(default=None, alias="imageUri")


class ChatMessage(BaseModel):
    """One entry in the demo conversation.

    JSON example:
    {
        "id": "1792425600000",
        "fromMe": true,
        "text": "Hej",
        "time": "2026-10-19T16:00:00Z",
        "type": "message"
    }
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    from_me: bool = Field(default=True, alias="fromMe")
    text: str = Field(min_length=1)
    time: datetime
    kind: MessageKind = Field(default=MessageKind.MESSAGE, alias="type")


class ActivityPlan(BaseModel):
    """A confirmed activity at one of the generated candidate slots.

    JSON example:
    {
        "id": "1792418400000",
        "activity": "Kaffe",
        "time": "2026-10-19T18:00:00+02:00",
        "label": "I dag 18:00",
        "createdAt": "2026-10-19T14:00:00Z"
    }
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    activity: str
    time: datetime
    label: str
    created_at: datetime = Field(alias="createdAt")


# ---------------------------------------------------------------------------
# In-memory values
# ---------------------------------------------------------------------------


@dataclass
class ProfileDraft:
    """Unvalidated profile input as collected by the profile editor.

    There is no age field: age is always recomputed from birthdate.
    """

    name: str
    birthdate: str | None = None
    gender: str | None = None
    interests: list[str] = field(default_factory=list)
    image_uri: str | None = None


@dataclass(frozen=True)
class Slot:
    """A generated (day, time-of-day) candidate, not yet a confirmed plan."""

    id: str          # "{day_offset}-{HH:MM}", e.g. "0-18:00"
    time: datetime   # timezone-aware
    label: str       # e.g. "I morgen 19:00"


@dataclass(frozen=True)
class ChatPartner:
    """The sample counterpart of the demo conversation."""

    id: str
    name: str
    age: int


@dataclass(frozen=True)
class FriendSuggestion:
    """A static friend suggestion (no matching is computed)."""

    id: str
    name: str
    mutual: int   # number of shared connections
