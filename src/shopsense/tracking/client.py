"""Measurement Protocol client for server-side tracking hits."""

import logging

import httpx

from shopsense.tracking.config import DEFAULT_COLLECT_URL
from shopsense.tracking.ecommerce import measurement_params
from shopsense.tracking.schema import EcommercePayload, EventProperties, Identity

PROTOCOL_VERSION = "1"


class MeasurementClient:
    """
    Synchronous client that sends one event per request to the collector.

    Delivery never breaks the storefront action that triggered it: network
    errors, timeouts and non-2xx responses are logged and dropped. Failed
    hits are not retried.

    Usage:
        from shopsense.tracking import Identity, EventProperties, MeasurementClient

        with MeasurementClient(tracking_id="UA-12345-1") as client:
            client.track_event(
                "completed purchase",
                identity=Identity(cid="111.222"),
                properties=EventProperties(eventCategory="Checkout", eventValue=4999),
            )
    """

    def __init__(
        self,
        tracking_id: str,
        endpoint: str = DEFAULT_COLLECT_URL,
        timeout: float = 30.0,
        track_user_id: bool = False,
        fail_silently: bool = True,
        logger: logging.Logger | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            tracking_id: Analytics property ID (``tid``).
            endpoint: Collection endpoint URL.
            timeout: Request timeout in seconds.
            track_user_id: Send the account ID (``uid``); suppressed otherwise.
            fail_silently: If True, catch errors and log warnings instead of raising.
            logger: Logger instance; defaults to ``logging.getLogger("shopsense.tracking")``.
            transport: Optional httpx transport, for tests.
        """
        self.tracking_id = tracking_id
        self.endpoint = endpoint
        self.track_user_id = track_user_id
        self.fail_silently = fail_silently
        self.logger = logger or logging.getLogger("shopsense.tracking")
        self.client = httpx.Client(timeout=timeout, transport=transport)

    def build_params(
        self,
        event_name: str,
        identity: Identity,
        properties: EventProperties,
        ecommerce: EcommercePayload | None = None,
    ) -> dict[str, str]:
        """Build the form parameters of a hit.

        Empty values are dropped. Extra properties are passed through as
        additional parameters (custom dimensions, for instance).
        """
        params: dict[str, str | None] = {
            "v": PROTOCOL_VERSION,
            "tid": self.tracking_id,
            "cid": identity.cid,
            "uid": identity.uid if self.track_user_id else None,
            "t": properties.hit_type,
            "ec": properties.event_category,
            "ea": properties.event_action or event_name,
            "el": properties.event_label,
            "ev": str(properties.event_value) if properties.event_value is not None else None,
            "ni": "1" if properties.non_interaction else None,
            "uip": identity.ip,
            "ua": identity.user_agent,
        }
        params.update(measurement_params(ecommerce))
        for key, value in properties.extra.items():
            params.setdefault(key, value)
        return {key: value for key, value in params.items() if value not in (None, "")}

    def track_event(
        self,
        event_name: str,
        identity: Identity,
        properties: EventProperties,
        ecommerce: EcommercePayload | None = None,
    ) -> httpx.Response | None:
        """Send a single event hit.

        Hits without a client ID cannot be attributed by the collector and
        are skipped.

        Returns:
            The HTTP response, or None if the hit was skipped or failed silently.
        """
        if not identity.cid:
            self.logger.debug("track_event skipped: no client ID for %r", event_name)
            return None

        params = self.build_params(event_name, identity, properties, ecommerce)
        return self._request(params, event_name)

    def _request(self, params: dict[str, str], event_name: str) -> httpx.Response | None:
        try:
            response = self.client.post(self.endpoint, data=params)
            response.raise_for_status()
            return response
        except httpx.HTTPError as exc:
            if not self.fail_silently:
                raise
            self.logger.warning(
                "Delivery of %r (%s) to %s failed: %s",
                event_name,
                params.get("ti") or params.get("el") or "-",
                self.endpoint,
                exc,
            )
            return None

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> "MeasurementClient":
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()
