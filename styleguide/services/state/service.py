"""Service for per-client state used by the HTTP routes."""

from styleguide.models import StateKey
from styleguide.services.state.repository import DBStateRepository, StateEntry, StateRepository

# Writing any of these makes the cached preview traits outdated.
_INVALIDATES_PREVIEW_TRAITS = (StateKey.BRAND_DETAILS, StateKey.BRAND_KEYWORDS, StateKey.SELECTED_TRAITS)


def parse_state_key(raw: str) -> StateKey:
    try:
        return StateKey(raw)
    except ValueError:
        raise ValueError(f"Unknown state key: {raw}") from None


class StateService:
    """Client state operations keyed by client id."""

    repository: StateRepository = DBStateRepository()

    @classmethod
    def get(cls, client_id: str, key: str) -> StateEntry:
        state_key = parse_state_key(key)
        entry = cls.repository.get(client_id, state_key)
        if entry is None:
            raise ValueError(f"State not found: {state_key.value}")
        return entry

    @classmethod
    def set(cls, client_id: str, key: str, value: object) -> StateEntry:
        state_key = parse_state_key(key)
        entry = cls.repository.set(client_id, state_key, value)
        if state_key in _INVALIDATES_PREVIEW_TRAITS:
            cls.repository.clear(client_id, StateKey.GENERATED_PREVIEW_TRAITS)
        return entry

    @classmethod
    def clear(cls, client_id: str, key: str) -> bool:
        return cls.repository.clear(client_id, parse_state_key(key))

    @classmethod
    def clear_all(cls, client_id: str) -> int:
        return cls.repository.clear_all(client_id)
