"""Short code generation utilities."""

import random
import string
from typing import Optional


class ShortCodeGenerator:
    """Generate short codes for links."""

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9

    def __init__(self, default_length: int = 6, rng: Optional[random.Random] = None):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes
            rng: Optional random source (a fresh random.Random if not specified)
        """
        if default_length < 1:
            raise ValueError("default_length must be at least 1")
        self.default_length = default_length
        self.rng = rng or random.Random()

    def generate_random(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Each character is drawn uniformly from the 62-character alphabet.
        Uniqueness is not guaranteed; callers check for collisions.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code
        """
        length = length or self.default_length
        return ''.join(self.rng.choices(self.BASE62_CHARS, k=length))
