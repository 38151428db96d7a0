"""Repository for user profile operations."""

from typing import Optional

from ..models import UserProfile
from .base import BaseRepository


class UserProfileRepository(BaseRepository):
    """Repository for user profile operations."""

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Get a user's profile by id."""
        return self.session.get(UserProfile, user_id)

    def get_email(self, user_id: str) -> Optional[str]:
        """Get the email address on file for a user, if any."""
        profile = self.get_profile(user_id)
        if profile and profile.email:
            return profile.email.strip() or None
        return None

    def upsert_profile(
        self,
        user_id: str,
        email: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> UserProfile:
        """Create a profile or update its contact details."""
        profile = self.get_profile(user_id)
        if profile is None:
            profile = UserProfile(id=user_id)
            self.session.add(profile)

        if email is not None:
            profile.email = email
        if display_name is not None:
            profile.display_name = display_name

        self.session.commit()
        self.session.refresh(profile)

        return profile
