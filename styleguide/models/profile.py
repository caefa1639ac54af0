"""Profile model: per-user subscription tier and saved guide allowance."""

import time
from enum import Enum

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class SubscriptionTier(str, Enum):
    STARTER = "starter"
    PRO = "pro"
    AGENCY = "agency"


class Profile(Base):
    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    subscription_tier: Mapped[str] = mapped_column(
        String(32), nullable=False, default=SubscriptionTier.STARTER.value
    )
    guides_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[int] = mapped_column(
        Integer, nullable=False, default=lambda: int(time.time())
    )

    def __repr__(self) -> str:
        return f"<Profile {self.user_id} tier={self.subscription_tier}>"
