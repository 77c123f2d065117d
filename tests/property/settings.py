# tests/property/settings.py
"""Standardized Hypothesis settings profiles for property tests.

Usage:
    from tests.property.settings import STANDARD_SETTINGS

    @given(persist=st.sampled_from(Persist))
    @STANDARD_SETTINGS
    def test_something(persist):
        ...

Tiers:
- STANDARD_SETTINGS: 100 examples - Regular property tests
- SLOW_SETTINGS: 50 examples - Tests driving full submissions through threads
- QUICK_SETTINGS: 20 examples - Fast validation tests (enums, simple rejection)
"""

from hypothesis import settings

STANDARD_SETTINGS = settings(max_examples=100)

SLOW_SETTINGS = settings(max_examples=50)

QUICK_SETTINGS = settings(max_examples=20)
