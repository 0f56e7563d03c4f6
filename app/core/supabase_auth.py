"""Supabase authentication helper: access token -> caller identity."""
from dataclasses import dataclass
from typing import Optional
import logging

from app.models.profile import UserProfile
from app.services.stores.profile_store import ProfileStore

logger = logging.getLogger(__name__)


@dataclass
class Identity:
    """
    An authenticated caller.

    ``profile`` is None when the auth user exists but has no profile row yet;
    such callers are signed in but never admins.
    """
    user_id: str
    email: Optional[str]
    profile: Optional[UserProfile] = None


class IdentityResolver:
    """Validates Supabase access tokens and loads the matching profile."""

    def __init__(self, auth_client, supabase):
        self.auth_client = auth_client
        self.profiles = ProfileStore(supabase)

    def verify_token(self, token: str) -> Optional[dict]:
        """Ask Supabase Auth who the token belongs to. Invalid tokens yield None."""
        try:
            user_response = self.auth_client.auth.get_user(token)
        except Exception as auth_error:
            logger.warning(f"Supabase auth failed: {auth_error}")
            return None

        if not user_response or not user_response.user:
            return None

        user = user_response.user
        return {"sub": user.id, "email": user.email}

    def resolve(self, token: Optional[str]) -> Optional[Identity]:
        """Return the caller's identity, or None when not authenticated."""
        if not token:
            return None

        payload = self.verify_token(token)
        if not payload:
            return None

        user_id = payload["sub"]
        profile = self.profiles.find(user_id)
        if profile is None:
            logger.warning(f"Authenticated user {user_id} has no profile row")

        return Identity(user_id=user_id, email=payload.get("email"), profile=profile)
