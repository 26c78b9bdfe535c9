# storefront/repositories/profile_repo.py
import logging
from datetime import datetime, timezone

from storefront.core.errors import RemoteError, log_error
from storefront.repositories.base import SupabaseRepository
from storefront.schemas.profile import ProfileRead, ProfileUpdate

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = "profile_id,username,avatar_url,created_at"


class ProfileRepository(SupabaseRepository):
    """
    Data access layer for profiles.

    Every method raises RemoteError: callers need to tell "not found" and
    "blocked by RLS" apart from other failures.
    """

    table = "profiles"

    async def get_profile(self, user_id: str) -> ProfileRead:
        """
        Raises:
            RemoteError(PGRST116): if no profile row exists yet.
            RemoteError(42501): if RLS hides the row.
        """
        row = await self._execute(
            self.query()
            .select(PROFILE_COLUMNS)
            .eq("profile_id", user_id)
            .single()
        )
        return ProfileRead.model_validate(row)

    async def create_profile(self, user_id: str) -> ProfileRead:
        """
        Insert a default profile: empty username/avatar, created now.
        """
        payload = {
            "profile_id": user_id,
            "username": "",
            "avatar_url": "",
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            rows = await self._execute(self.query().insert(payload))
        except RemoteError as e:
            log_error("creating profile", e)
            if e.is_rls_violation:
                logger.warning(
                    "RLS policy blocks profile inserts for %s; "
                    "check the profiles insert policy in Supabase",
                    user_id,
                )
            raise

        if not rows:
            raise RemoteError("Profile insert returned no row")
        return ProfileRead.model_validate(rows[0])

    async def update_profile(
        self,
        user_id: str,
        updates: ProfileUpdate,
    ) -> ProfileRead:
        try:
            rows = await self._execute(
                self.query()
                .update(updates.model_dump(exclude_unset=True))
                .eq("profile_id", user_id)
            )
        except RemoteError as e:
            log_error("updating profile", e)
            raise

        if not rows:
            raise RemoteError("Profile not found", code="PGRST116")
        return ProfileRead.model_validate(rows[0])
