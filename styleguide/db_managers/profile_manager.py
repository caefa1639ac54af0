"""Manager for Profile: lookups and upserts using a DB session."""

from sqlalchemy.orm import Session

from styleguide.models import Profile


class ProfileManager:
    """Provides access to user profiles. Takes a DB session as input."""

    def __init__(self, session: Session):
        self._session = session

    def get(self, user_id: str) -> Profile | None:
        return self._session.query(Profile).filter(Profile.user_id == user_id).first()

    def upsert(self, user_id: str, *, subscription_tier: str, guides_limit: int) -> Profile:
        profile = self.get(user_id)
        if profile is None:
            profile = Profile(user_id=user_id)
            self._session.add(profile)
        profile.subscription_tier = subscription_tier
        profile.guides_limit = guides_limit
        self._session.flush()
        return profile
