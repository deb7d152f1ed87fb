"""
Friend Finder: App Context.

UI-agnostic entry point: builds every store on one storage medium and
hands the bundle to the presentation layer. Stores never call each other;
they only share the medium, each under its own key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from src.core.conversation_store import ConversationStore
from src.core.plan_store import PlanStore
from src.core.preference_store import PreferenceStore, ThemeContext
from src.core.profile_store import ProfileStore

if TYPE_CHECKING:
    from src.ports.storage_port import KeyValueStorage

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    theme: ThemeContext
    preferences: PreferenceStore
    profile: ProfileStore
    conversation: ConversationStore
    plans: PlanStore


async def create_app_context(storage: KeyValueStorage | None = None) -> AppContext:
    """Wire all stores and read the persisted theme once.

    Args:
        storage: Medium to use; defaults to the STORAGE_PROVIDER adapter.
    """
    if storage is None:
        from src.adapters.storage_factory import create_storage

        storage = create_storage()

    preferences = PreferenceStore(storage)
    theme = ThemeContext(preferences)
    await theme.load()

    context = AppContext(
        theme=theme,
        preferences=preferences,
        profile=ProfileStore(storage),
        conversation=ConversationStore(storage),
        plans=PlanStore(storage),
    )
    logger.info(
        "App context ready (%s theme, %d plan slots)",
        theme.mode.value, len(context.plans.slots),
    )
    return context
