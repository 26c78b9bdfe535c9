# storefront/services/profile_service.py
import logging

from storefront.core.errors import RemoteError, handle_common_errors
from storefront.core.notifications import Notifier
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.profile_repo import ProfileRepository
from storefront.schemas.order import OrderRead
from storefront.schemas.profile import ProfilePageState, ProfileRead, ProfileUpdate
from storefront.services.auth_service import AuthService

logger = logging.getLogger(__name__)

SIGN_IN_PATH = "/sign-in"


class ProfileService:
    """
    Orchestrates the profile screen.

    Responsibilities:
      - load profile (creating it lazily through AuthService.ensure_profile)
      - load the user's orders
      - decide whether the page should redirect to sign-in
      - save username/avatar edits
    """

    def __init__(
        self,
        auth: AuthService,
        profiles: ProfileRepository,
        orders: OrderRepository,
        notifier: Notifier,
    ):
        self.auth = auth
        self.profiles = profiles
        self.orders = orders
        self.notifier = notifier

    async def load(self, user_id: str) -> ProfilePageState:
        """
        Build the profile page state.

        Flow:
          1. Ensure the profile exists (read, or create with defaults).
          2. On creation blocked by RLS => permission toast, stay on page.
             On any other creation failure => toast + redirect to sign-in.
             On a fetch failure => toast, page renders without profile data.
          3. Fetch orders; failures are logged only.
        """
        state = ProfilePageState()

        outcome = await self.auth.ensure_profile(user_id)
        if outcome.profile is not None:
            self._apply_profile(state, outcome.profile)
        elif outcome.stage == "create" and outcome.error is not None:
            if outcome.error.is_rls_violation:
                self.notifier.error(
                    "Unable to create profile due to permissions. "
                    "Please contact support."
                )
            else:
                handle_common_errors(
                    outcome.error,
                    self.notifier,
                    context="creating profile",
                )
                state.redirect_to = SIGN_IN_PATH
        elif outcome.error is not None:
            handle_common_errors(
                outcome.error,
                self.notifier,
                context="fetching profile",
            )

        state.orders = await self._load_orders(user_id)
        return state

    async def _load_orders(self, user_id: str) -> list[OrderRead]:
        try:
            return await self.orders.get_user_orders(user_id)
        except RemoteError as e:
            handle_common_errors(
                e,
                self.notifier,
                context="fetching orders",
                show_toast=False,
                silent_on_no_rows=True,
            )
            return []

    @staticmethod
    def _apply_profile(state: ProfilePageState, profile: ProfileRead) -> None:
        state.username = profile.username or ""
        state.avatar_url = profile.avatar_url or ""
        state.created_at = profile.created_at

    async def save(self, user_id: str, update: ProfileUpdate) -> ProfileRead | None:
        """
        Persist username/avatar edits.

        Returns the updated profile, or None if the save failed (the
        failure has already been reported through a toast).
        """
        try:
            profile = await self.profiles.update_profile(user_id, update)
        except RemoteError as e:
            handle_common_errors(e, self.notifier, context="updating profile")
            return None

        self.notifier.success("Profile updated successfully!")
        return profile
