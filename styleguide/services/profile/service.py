"""Service for user profiles and subscription tiers."""

from constants import GUIDE_LIMIT_DEFAULT, GUIDE_LIMITS
from styleguide.db import get_default_adapter
from styleguide.db_managers import ProfileManager
from styleguide.models import SubscriptionTier

# Legacy tier name still present on older profiles.
_TIER_ALIASES: dict[str, str] = {"free": SubscriptionTier.STARTER.value}


def normalize_tier(raw: str | None) -> str:
    tier = (raw or "").strip().lower()
    tier = _TIER_ALIASES.get(tier, tier)
    valid = {t.value for t in SubscriptionTier}
    return tier if tier in valid else SubscriptionTier.STARTER.value


def guide_limit(tier: str) -> int:
    return GUIDE_LIMITS.get(tier, GUIDE_LIMIT_DEFAULT)


class ProfileService:
    """Profile lookups. Users without a profile are on the starter tier."""

    @staticmethod
    def get_subscription_tier(user_id: str) -> str:
        adapter = get_default_adapter()
        with adapter.session() as session:
            profile = ProfileManager(session).get(user_id)
            return normalize_tier(profile.subscription_tier if profile else None)

    @staticmethod
    def set_subscription_tier(user_id: str, tier: str) -> str:
        normalized = normalize_tier(tier)
        adapter = get_default_adapter()
        with adapter.session() as session:
            ProfileManager(session).upsert(
                user_id,
                subscription_tier=normalized,
                guides_limit=guide_limit(normalized),
            )
        return normalized
