"""Client ID generation.

A generated client ID is only needed when a visitor cannot be identified
from the analytics cookie or from a stored identity record. Uniqueness is
what matters here, so a weak random source is acceptable as a fallback.
"""

import logging
import random
import re
import secrets
from uuid import UUID

logger = logging.getLogger(__name__)

UUID4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$"
)


def uuid_from_bytes(raw: bytes) -> str:
    """Format 16 random bytes as an RFC 4122 version 4 UUID.

    The version nibble is forced to ``4`` and the variant bits to ``10``,
    so any 16-byte input yields a valid v4 identifier.

    Raises:
        ValueError: If ``raw`` is not exactly 16 bytes long.
    """
    if len(raw) != 16:
        raise ValueError(f"expected 16 bytes, got {len(raw)}")
    return str(UUID(bytes=bytes(raw), version=4))


def generate_uuid() -> str:
    """Generate a version 4 UUID for use as a client ID."""
    try:
        raw = secrets.token_bytes(16)
    except (NotImplementedError, OSError) as exc:
        logger.warning("Secure random source unavailable (%s), using fallback", exc)
        raw = random.getrandbits(128).to_bytes(16, "big")  # noqa: S311
    return uuid_from_bytes(raw)


def is_uuid4(value: str | None) -> bool:
    """Return True if ``value`` is a lowercase v4 UUID string."""
    return bool(value) and UUID4_PATTERN.match(value) is not None
