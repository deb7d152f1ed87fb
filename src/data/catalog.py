"""Fixed catalogs offered by the app's screens.

Interests, genders and activities are closed lists the UI picks from;
the chat partner and friend suggestions are static sample data.
"""

from __future__ import annotations

from src.data.models import ChatPartner, FriendSuggestion

INTERESTS: tuple[str, ...] = (
    "Musik", "Film", "Sport", "Rejser", "Mad", "Spil", "Kunst", "Fotografi",
    "Litteratur", "Teknologi", "Fitness", "Dans", "Yoga", "Strikning",
    "Havearbejde", "Sprog", "Frivilligt arbejde", "Camping", "Klatring",
)

GENDERS: tuple[str, ...] = ("Mand", "Kvinde", "Andet")

# Offered by the activity planner
ACTIVITIES: tuple[str, ...] = ("Kaffe", "Biograftur", "Middag", "Gåtur", "Brætspil")

# Offered by the chat "suggest activity" prompt
PROPOSAL_ACTIVITIES: tuple[str, ...] = ("Kaffe", "Biograftur", "Middag")

SAMPLE_PARTNER = ChatPartner(id="u1", name="Mia", age=24)

_FRIEND_SUGGESTIONS: tuple[FriendSuggestion, ...] = (
    FriendSuggestion(id="1", name="Mia", mutual=3),
    FriendSuggestion(id="2", name="Jonas", mutual=2),
)


def list_friend_suggestions() -> list[FriendSuggestion]:
    """Return the static friend suggestion list."""
    return list(_FRIEND_SUGGESTIONS)
