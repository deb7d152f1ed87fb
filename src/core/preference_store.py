"""
Friend Finder: Preference Store.

Persists the light/dark theme choice under `app_theme` as the plain
string "dark" or "light", and resolves a mode into its fixed color tokens.

ThemeContext is the injectable theme state for the UI: it owns the current
mode, persists through PreferenceStore, and notifies subscribers on change.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Callable

from src.data.models import ThemeMode, ThemeTokens
from src.ports.storage_port import PersistenceError

if TYPE_CHECKING:
    from src.ports.storage_port import KeyValueStorage

logger = logging.getLogger(__name__)

THEME_KEY = "app_theme"

LIGHT_TOKENS = ThemeTokens(
    background="#ffffff",
    surface="#f2f3f5",
    text="#0b1b2b",
    muted="#6b7280",
    accent="#2563eb",
)

DARK_TOKENS = ThemeTokens(
    background="#071028",
    surface="#0f1724",
    text="#e6eef8",
    muted="#9aa6b2",
    accent="#e19d41",
)

_TOKENS: dict[ThemeMode, ThemeTokens] = {
    ThemeMode.LIGHT: LIGHT_TOKENS,
    ThemeMode.DARK: DARK_TOKENS,
}

ThemeListener = Callable[[ThemeMode, ThemeTokens], None]


def resolve(mode: ThemeMode) -> ThemeTokens:
    """Return the color tokens for a theme mode. No I/O."""
    return _TOKENS[mode]


def opposite(mode: ThemeMode) -> ThemeMode:
    return ThemeMode.LIGHT if mode is ThemeMode.DARK else ThemeMode.DARK


class PreferenceStore:
    """Owns the `app_theme` key."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self._lock = asyncio.Lock()

    async def load(self) -> ThemeMode:
        """Read the persisted mode; anything but exactly "dark" is light."""
        try:
            raw = await self._storage.get_item(THEME_KEY)
        except PersistenceError as exc:
            logger.warning("Theme load failed, defaulting to light: %s", exc)
            return ThemeMode.LIGHT
        return ThemeMode.DARK if raw == ThemeMode.DARK.value else ThemeMode.LIGHT

    async def toggle(self, current: ThemeMode) -> ThemeMode:
        """Flip the mode and persist it. The flip survives a failed write."""
        new_mode = opposite(current)
        async with self._lock:
            try:
                await self._storage.set_item(THEME_KEY, new_mode.value)
            except PersistenceError as exc:
                logger.error("Failed to persist theme '%s': %s", new_mode.value, exc)
        return new_mode

    @staticmethod
    def resolve(mode: ThemeMode) -> ThemeTokens:
        return resolve(mode)


class ThemeContext:
    """Current theme shared with every screen.

    The UI reads `mode`/`tokens`, calls `toggle()`, and re-renders from
    subscription callbacks instead of relying on global state.
    """

    def __init__(
        self, store: PreferenceStore, mode: ThemeMode = ThemeMode.LIGHT,
    ) -> None:
        self._store = store
        self._mode = mode
        self._listeners: list[ThemeListener] = []

    @property
    def mode(self) -> ThemeMode:
        return self._mode

    @property
    def tokens(self) -> ThemeTokens:
        return resolve(self._mode)

    @property
    def is_dark(self) -> bool:
        return self._mode is ThemeMode.DARK

    async def load(self) -> ThemeMode:
        """Read the persisted mode once, at startup."""
        mode = await self._store.load()
        self._set(mode)
        return mode

    async def toggle(self) -> ThemeMode:
        mode = await self._store.toggle(self._mode)
        self._set(mode)
        return mode

    def subscribe(self, listener: ThemeListener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, mode: ThemeMode) -> None:
        if mode is self._mode:
            return
        self._mode = mode
        tokens = resolve(mode)
        for listener in list(self._listeners):
            try:
                listener(mode, tokens)
            except Exception as exc:
                logger.error("Theme listener %r failed: %s", listener, exc)
