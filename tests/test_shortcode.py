"""Tests for short code generation."""

import random

import pytest
from shortlinks.common.validators import is_valid_short_code
from shortlinks.shortcode import ShortCodeGenerator


class TestShortCodeGenerator:
    """Test short code generation."""

    def test_generate_random(self):
        """Test random code generation."""
        generator = ShortCodeGenerator(default_length=6)

        for _ in range(200):
            code = generator.generate_random()
            assert len(code) == 6
            assert is_valid_short_code(code)[0]
            assert all(c in ShortCodeGenerator.BASE62_CHARS for c in code)

    def test_generate_random_custom_length(self):
        """Test random code with custom length."""
        generator = ShortCodeGenerator(default_length=6)

        code = generator.generate_random(length=10)
        assert len(code) == 10
        assert is_valid_short_code(code)[0]

    def test_seeded_generator_is_reproducible(self):
        first = ShortCodeGenerator(rng=random.Random(7)).generate_random()
        second = ShortCodeGenerator(rng=random.Random(7)).generate_random()
        assert first == second

    def test_alphabet(self):
        assert len(ShortCodeGenerator.BASE62_CHARS) == 62
        assert len(set(ShortCodeGenerator.BASE62_CHARS)) == 62

    def test_invalid_length(self):
        with pytest.raises(ValueError):
            ShortCodeGenerator(default_length=0)

