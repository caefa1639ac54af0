"""ClientState model: typed per-client session state (brand details, traits, preview...)."""

import json
import time
from enum import Enum

from sqlalchemy import Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class StateKey(str, Enum):
    BRAND_DETAILS = "brandDetails"
    SELECTED_TRAITS = "selectedTraits"
    BRAND_KEYWORDS = "brandKeywords"
    PREVIEW_CONTENT = "previewContent"
    GENERATED_STYLE_GUIDE = "generatedStyleGuide"
    GENERATED_PREVIEW_TRAITS = "generatedPreviewTraits"
    EMAIL_CAPTURE = "emailCapture"
    PAYMENT_STATUS = "styleGuidePaymentStatus"
    PLAN = "styleGuidePlan"


class ClientState(Base):
    """One value per (client_id, state_key); updated_at is the write timestamp."""

    __tablename__ = "client_state"
    __table_args__ = (UniqueConstraint("client_id", "state_key", name="uq_client_state_key"),)

    state_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    state_key: Mapped[str] = mapped_column(String(64), nullable=False)
    value_json: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[int] = mapped_column(
        Integer, nullable=False, default=lambda: int(time.time())
    )

    def get_value(self) -> object:
        try:
            return json.loads(self.value_json)
        except (json.JSONDecodeError, TypeError):
            return None

    def set_value(self, value: object) -> None:
        self.value_json = json.dumps(value)

    def __repr__(self) -> str:
        return f"<ClientState {self.client_id}:{self.state_key} updated_at={self.updated_at}>"
