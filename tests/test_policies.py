"""
Bucketing and fallback policies in isolation.
"""

import pytest

from sash_coefficients.policies.bucketing import bracket, ceiling_index
from sash_coefficients.policies.fallback import FirstAvailableFallback
from sash_coefficients.policies.registry import get_bucketing_policy, get_fallback_policy

AXIS = (0.4, 0.6, 0.8, 1.0)


@pytest.mark.parametrize("value, expected", [
    (0.4, 0),
    (0.41, 1),
    (0.6, 1),
    (0.7999999999, 2),
    (0.95, 3),
    (1.0, 3),
])
def test_ceiling_index(value, expected):
    assert ceiling_index(AXIS, value) == expected


def test_bracket():
    assert bracket(AXIS, 0.5) == (0, 1)
    assert bracket(AXIS, 0.6) == (1, 1)
    assert bracket(AXIS, 0.4) == (0, 0)
    assert bracket((2.0,), 2.0) == (0, 0)


def test_first_available_is_lexicographic():
    policy = FirstAvailableFallback()
    assert policy.choose("XYZ", ("E", "1", "2")) == "1"
    assert policy.choose("XYZ", ("standard", "blackout")) == "blackout"
    assert policy.choose("XYZ", ()) is None


def test_registry_lookup():
    assert get_bucketing_policy("ceiling").name == "ceiling"
    assert get_bucketing_policy("bilinear").name == "bilinear"
    assert get_fallback_policy("first_available").name == "first_available"
    with pytest.raises(ValueError, match="first_available"):
        get_fallback_policy("closest")
