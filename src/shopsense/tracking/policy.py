"""Decides whether an action may be tracked."""

import logging

from shopsense.tracking.config import TrackingSettings
from shopsense.tracking.context import RequestContext
from shopsense.tracking.hooks import TrackingHooks
from shopsense.tracking.storefront import Storefront

MANAGE_STORE_CAPABILITY = "manage_store"


class _CurrentUser:
    def __repr__(self) -> str:
        return "CURRENT_USER"


#: Default subject: the account signed in to the current request.
CURRENT_USER = _CurrentUser()

Subject = str | None | _CurrentUser


class TrackingPolicy:
    """
    The tracking gate.

    An action is blocked when:

    - tracking is not configured (disabled, or no tracking ID),
    - it happens in the admin area outside a background request, unless it
      is flagged as an admin event,
    - the subject's role is excluded, or the subject can manage the store
      and admin tracking is off.

    The ``do_not_track`` hook gets the last word.
    """

    def __init__(
        self,
        settings: TrackingSettings,
        storefront: Storefront,
        hooks: TrackingHooks | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings
        self.storefront = storefront
        self.hooks = hooks or TrackingHooks()
        self.logger = logger or logging.getLogger("shopsense.tracking")

    def should_track(
        self,
        context: RequestContext,
        admin_event: bool = False,
        user_id: Subject = CURRENT_USER,
    ) -> bool:
        """Return True if the action may be tracked.

        Args:
            context: The current request; supplies the admin and ajax flags.
            admin_event: The action is expected to happen in the admin area
                (an order status change, for instance) and should be tracked.
            user_id: Account the action is about; defaults to the signed-in
                one. None names a guest, who is always tracked.
        """
        return not self.do_not_track(context, admin_event=admin_event, user_id=user_id)

    def do_not_track(
        self,
        context: RequestContext,
        admin_event: bool = False,
        user_id: Subject = CURRENT_USER,
    ) -> bool:
        if not self.settings.is_configured:
            return True

        if not admin_event and not context.is_ajax and context.is_admin:
            do_not_track = True
        else:
            do_not_track = not self.is_tracking_enabled_for_user(context, user_id)

        if self.hooks.do_not_track is not None:
            subject = None if user_id is CURRENT_USER or user_id is None else str(user_id)
            do_not_track = bool(self.hooks.do_not_track(do_not_track, admin_event, subject))
        return do_not_track

    def is_tracking_enabled_for_user(
        self, context: RequestContext, user_id: Subject = CURRENT_USER
    ) -> bool:
        """Return True unless the account's role keeps it out of analytics.

        Results are cached on the context, so an account is looked up at most
        once per request. Guests are always tracked: pass None for an action
        about a guest, such as a guest order handled from the admin area.
        """
        if user_id is CURRENT_USER:
            user_id = context.user_id
        if user_id is None:
            return True
        user_id = str(user_id)

        if user_id not in context.role_tracking_cache:
            enabled = True
            account = self.storefront.get_account(user_id)

            if account is not None:
                if set(account.roles) & set(self.settings.excluded_roles):
                    enabled = False
                elif account.can(MANAGE_STORE_CAPABILITY):
                    enabled = self.settings.admin_tracking_enabled

            if not enabled:
                self.logger.debug("Tracking disabled for account %s by role", user_id)
            context.role_tracking_cache[user_id] = enabled

        return context.role_tracking_cache[user_id]
