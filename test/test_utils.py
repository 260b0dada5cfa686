import math
import time

import pytest
from hypothesis import given
from hypothesis.strategies import integers, none, one_of

from traffic_model.utils import EPSILON_6, Timer, is_positive, value_or_default


@given(one_of(none(), integers()), integers())
def test_value_or_default(value, default):
    result = value_or_default(value, default)
    if value is None:
        assert result == default
    else:
        assert result == value


@pytest.mark.parametrize('value, expected', [
    (1.0, True),
    (EPSILON_6 * 2, True),
    (EPSILON_6, False),
    (0.0, False),
    (-3.0, False),
    (math.inf, False),
    (math.nan, False),
])
def test_is_positive(value, expected):
    assert is_positive(value) is expected


def test_timer():
    timer = Timer().start()
    time.sleep(0.01)
    assert timer.time_elapsed() > 0
