"""
Client state repository: typed get/set/clear per logical entity.

Call sites depend on StateRepository only, so the backing store (database rows,
an in-process dict, a server session) can be swapped without touching them.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, TypedDict

from constants import PREVIEW_TRAITS_TTL_SECONDS
from styleguide.db import get_default_adapter
from styleguide.db_managers import StateManager
from styleguide.models import StateKey

logger = logging.getLogger(__name__)


class StateEntry(TypedDict):
    value: object
    saved_at: int


class StateRepository(ABC):
    """Abstract per-client state store. Every entry keeps its write timestamp."""

    @abstractmethod
    def get(self, client_id: str, key: StateKey) -> StateEntry | None:
        ...

    @abstractmethod
    def set(self, client_id: str, key: StateKey, value: object, *, now: int | None = None) -> StateEntry:
        ...

    @abstractmethod
    def clear(self, client_id: str, key: StateKey) -> bool:
        ...

    @abstractmethod
    def clear_all(self, client_id: str) -> int:
        ...


class DBStateRepository(StateRepository):
    """State rows in the client_state table via the default DB adapter."""

    def get(self, client_id: str, key: StateKey) -> StateEntry | None:
        adapter = get_default_adapter()
        with adapter.session() as session:
            row = StateManager(session).get(client_id, key)
            if row is None:
                return None
            return StateEntry(value=row.get_value(), saved_at=row.updated_at)

    def set(self, client_id: str, key: StateKey, value: object, *, now: int | None = None) -> StateEntry:
        adapter = get_default_adapter()
        with adapter.session() as session:
            row = StateManager(session).set(client_id, key, value, now=now)
            return StateEntry(value=row.get_value(), saved_at=row.updated_at)

    def clear(self, client_id: str, key: StateKey) -> bool:
        adapter = get_default_adapter()
        with adapter.session() as session:
            return StateManager(session).clear(client_id, key)

    def clear_all(self, client_id: str) -> int:
        adapter = get_default_adapter()
        with adapter.session() as session:
            return StateManager(session).clear_all(client_id)


class InMemoryStateRepository(StateRepository):
    """Dict-backed store for scripts and single-process use."""

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], StateEntry] = {}

    def get(self, client_id: str, key: StateKey) -> StateEntry | None:
        return self._entries.get((client_id, key.value))

    def set(self, client_id: str, key: StateKey, value: object, *, now: int | None = None) -> StateEntry:
        entry = StateEntry(value=value, saved_at=int(time.time()) if now is None else int(now))
        self._entries[(client_id, key.value)] = entry
        return entry

    def clear(self, client_id: str, key: StateKey) -> bool:
        return self._entries.pop((client_id, key.value), None) is not None

    def clear_all(self, client_id: str) -> int:
        keys = [k for k in self._entries if k[0] == client_id]
        for k in keys:
            del self._entries[k]
        return len(keys)


def traits_fingerprint(brand_name: str, trait_names: list[str]) -> str:
    """Identity of the brand and trait selection a cached Brand Voice was written for."""
    names = ",".join(t.strip().lower() for t in trait_names)
    return f"{brand_name.strip().lower()}|{names}"


class PreviewTraitsCache:
    """
    Reuse generated preview traits between the preview and the full guide.

    An entry is fresh while now - saved_at < ttl_seconds and while it was saved
    for the same brand fingerprint; a stale or mismatched entry is cleared when read.
    """

    def __init__(
        self,
        repository: StateRepository,
        *,
        ttl_seconds: int = PREVIEW_TRAITS_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self._repository = repository
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    def get(self, client_id: str, fingerprint: str = "") -> str | None:
        entry = self._repository.get(client_id, StateKey.GENERATED_PREVIEW_TRAITS)
        if entry is None:
            return None
        age = int(self._clock()) - entry["saved_at"]
        if age >= self._ttl_seconds:
            logger.info("Preview traits for %s are stale (%ds old); clearing", client_id, age)
            self._repository.clear(client_id, StateKey.GENERATED_PREVIEW_TRAITS)
            return None
        value = entry["value"]
        if not isinstance(value, dict):
            return None
        if value.get("fingerprint", "") != fingerprint:
            logger.info("Preview traits for %s were saved for another brand; clearing", client_id)
            self._repository.clear(client_id, StateKey.GENERATED_PREVIEW_TRAITS)
            return None
        traits = value.get("traits")
        return traits if isinstance(traits, str) and traits else None

    def save(self, client_id: str, traits_markdown: str, fingerprint: str = "") -> None:
        self._repository.set(
            client_id,
            StateKey.GENERATED_PREVIEW_TRAITS,
            {"traits": traits_markdown, "fingerprint": fingerprint},
            now=int(self._clock()),
        )
