"""Manager for ClientState: typed key/value rows per client."""

import time

from sqlalchemy.orm import Session

from styleguide.models import ClientState, StateKey


class StateManager:
    """Provides access to per-client state rows. Takes a DB session as input."""

    def __init__(self, session: Session):
        self._session = session

    def get(self, client_id: str, key: StateKey) -> ClientState | None:
        return (
            self._session.query(ClientState)
            .filter(ClientState.client_id == client_id, ClientState.state_key == key.value)
            .first()
        )

    def set(self, client_id: str, key: StateKey, value: object, *, now: int | None = None) -> ClientState:
        row = self.get(client_id, key)
        if row is None:
            row = ClientState(client_id=client_id, state_key=key.value)
            self._session.add(row)
        row.set_value(value)
        row.updated_at = int(time.time()) if now is None else int(now)
        self._session.flush()
        return row

    def clear(self, client_id: str, key: StateKey) -> bool:
        deleted = (
            self._session.query(ClientState)
            .filter(ClientState.client_id == client_id, ClientState.state_key == key.value)
            .delete(synchronize_session=False)
        )
        return bool(deleted)

    def clear_all(self, client_id: str) -> int:
        return (
            self._session.query(ClientState)
            .filter(ClientState.client_id == client_id)
            .delete(synchronize_session=False)
        )
