"""Per-request tracking state."""

from dataclasses import dataclass, field
from typing import Literal
from urllib.parse import urlparse

from shopsense.tracking.queue import EventQueue

GA_COOKIE_NAME = "_ga"

PageKind = Literal[
    "front",
    "shop",
    "product",
    "product_category",
    "product_tag",
    "search",
    "archive",
    "cart",
    "checkout",
    "account",
    "other",
]


@dataclass
class RequestContext:
    """
    Everything the engine knows about the request being handled.

    Build one per storefront request and drop it when the request ends.
    The event queue and the caches below live and die with it.

    Attributes:
        cookies: Request cookies.
        user_id: Signed-in account ID, or None for guests.
        ip: Client IP address.
        user_agent: Client user agent.
        is_admin: Request is for the store's admin area.
        is_ajax: Request is a background (ajax) request.
        referer: ``Referer`` header.
        path: Request path.
        page: Kind of storefront page being rendered.
    """

    cookies: dict[str, str] = field(default_factory=dict)
    user_id: str | None = None
    ip: str | None = None
    user_agent: str | None = None
    is_admin: bool = False
    is_ajax: bool = False
    referer: str | None = None
    path: str | None = None
    page: PageKind | None = None

    queue: EventQueue = field(default_factory=EventQueue)
    role_tracking_cache: dict[str, bool] = field(default_factory=dict)
    client_id: str | None = None

    def __post_init__(self) -> None:
        if self.user_id is not None:
            self.user_id = str(self.user_id)

    @property
    def is_logged_in(self) -> bool:
        return self.user_id is not None

    @property
    def ga_cookie(self) -> str | None:
        return self.cookies.get(GA_COOKIE_NAME)

    def not_page_reload(self) -> bool:
        """False when the request re-posts to the page it came from.

        Stops form submissions (applying a coupon on the cart page, say)
        from tracking the page's events a second time. No referer counts as
        a fresh page.
        """
        if not self.referer:
            return True
        return urlparse(self.referer).path != urlparse(self.path or "").path
