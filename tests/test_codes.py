"""Tests for pickup code generation and the retry combinator."""

import pytest

from kiosk.core.errors import RetryExhausted
from kiosk.pickup.codes import ALPHABET, generate_code, normalize_code
from kiosk.pickup.retry import retry


class TestGenerateCode:
    """Tests for generate_code."""

    def test_alphabet_excludes_confusable_letters(self):
        assert len(ALPHABET) == 23
        for char in "OIL":
            assert char not in ALPHABET

    def test_default_length(self):
        assert len(generate_code()) == 3

    def test_custom_length(self):
        assert len(generate_code(6)) == 6

    def test_codes_use_only_alphabet(self):
        for _ in range(500):
            code = generate_code()
            assert len(code) == 3
            assert code.isupper()
            assert code.isalpha()
            assert all(char in ALPHABET for char in code)
            assert not set(code) & {"O", "I", "L"}

    def test_codes_vary(self):
        codes = {generate_code() for _ in range(200)}
        assert len(codes) > 1

    def test_normalize_code(self):
        assert normalize_code(" abc ") == "ABC"
        assert normalize_code("XyZ") == "XYZ"


class TestRetry:
    """Tests for the bounded retry combinator."""

    def test_returns_first_acceptable(self):
        values = iter([1, 2, 3, 4])
        calls = []

        def fn():
            value = next(values)
            calls.append(value)
            return value

        assert retry(fn, max_attempts=10, is_acceptable=lambda v: v >= 3) == 3
        assert calls == [1, 2, 3]

    def test_accepts_on_first_attempt(self):
        assert retry(lambda: "ok", max_attempts=1, is_acceptable=lambda v: True) == "ok"

    def test_exhausted_raises(self):
        calls = []

        def fn():
            calls.append(1)
            return "AAA"

        with pytest.raises(RetryExhausted) as exc_info:
            retry(fn, max_attempts=10, is_acceptable=lambda v: False)

        assert len(calls) == 10
        assert exc_info.value.attempts == 10
        assert exc_info.value.status_code == 500

    def test_invalid_max_attempts(self):
        with pytest.raises(ValueError):
            retry(lambda: 1, max_attempts=0, is_acceptable=lambda v: True)
