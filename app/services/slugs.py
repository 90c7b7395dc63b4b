"""Public slug generation for patient records."""

import re
import secrets
import string
from collections.abc import Awaitable, Callable
from typing import Protocol

from app.errors import SlugExhausted
from app.utils.logging import get_logger

logger = get_logger(__name__)

SLUG_PREFIX = "E-"
SLUG_ALPHABET = string.ascii_uppercase + string.digits
SLUG_LENGTH = 5
SLUG_PATTERN = re.compile(rf"^{re.escape(SLUG_PREFIX)}[A-Z0-9]{{{SLUG_LENGTH}}}$")

SlugExists = Callable[[str], Awaitable[bool]]


class SlugGenerator(Protocol):
    """Interface for slug generators.

    A returned slug is unused at the moment of the check but not reserved;
    the caller must insert it promptly and rely on the unique constraint.
    """

    async def generate(self, exists: SlugExists) -> str:
        """Return a slug for which `exists` reported False."""
        ...


class RandomSlugGenerator:
    """Samples `E-XXXXX` tokens until one is not taken."""

    def __init__(self, max_attempts: int = 32):
        """Initialize generator.

        Args:
            max_attempts: Candidates to try before raising SlugExhausted
        """
        self.max_attempts = max_attempts

    def candidate(self) -> str:
        """Draw one random slug."""
        return SLUG_PREFIX + "".join(secrets.choice(SLUG_ALPHABET) for _ in range(SLUG_LENGTH))

    async def generate(self, exists: SlugExists) -> str:
        """Return an unused slug.

        Raises:
            SlugExhausted: If every candidate was already taken
        """
        for attempt in range(1, self.max_attempts + 1):
            slug = self.candidate()
            if not await exists(slug):
                return slug
            logger.warning(f"Slug {slug} already taken (attempt {attempt}/{self.max_attempts})")

        raise SlugExhausted(f"No unused slug found after {self.max_attempts} attempts")


def is_valid_slug(value: str) -> bool:
    """Check that a value has the public slug shape."""
    return bool(SLUG_PATTERN.match(value))
