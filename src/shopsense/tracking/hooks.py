"""Extension points for customising computed tracking values.

Each hook receives the value the engine computed and returns the value to
use instead. Unset hooks leave the computed value alone.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shopsense.tracking.context import RequestContext
    from shopsense.tracking.storefront import Product


@dataclass(frozen=True)
class TrackingHooks:
    """
    Optional overrides injected into the tracking components.

    Attributes:
        do_not_track: ``(computed, admin_event, user_id) -> bool``, final say
            on whether an action is blocked.
        generate_client_id: ``(computed) -> bool``, whether to generate a
            UUID when no client ID was found.
        identity_override: ``(context) -> cid | None``, an externally stored
            client ID for the current request, checked before the cookie.
        product_identifier: ``(computed, product) -> str``.
        product_details: ``(data, product) -> dict``, mutates the product
            field object before it is rendered.
        impression_data: ``(data, product) -> dict``, same for impressions.
        tracker_options: ``(options) -> dict``, options of the ``create`` call.
        skip_completed_purchase: ``(order_id) -> bool``, suppress the
            purchase event for an order.
    """

    do_not_track: Callable[[bool, bool, str | None], bool] | None = None
    generate_client_id: Callable[[bool], bool] | None = None
    identity_override: Callable[["RequestContext"], str | None] | None = None
    product_identifier: Callable[[str, "Product"], str] | None = None
    product_details: Callable[[dict, "Product"], dict] | None = None
    impression_data: Callable[[dict, "Product"], dict] | None = None
    tracker_options: Callable[[dict], dict] | None = None
    skip_completed_purchase: Callable[[str], bool] | None = None
