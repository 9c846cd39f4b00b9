"""
# Encoder Tests
"""

import pytest

from ..encoders import code_to_thermometer
from ..errors import PreconditionError


def test_thermometer_examples():
    F, T = False, True
    assert code_to_thermometer(0, 4) == [F, F, F, F]
    assert code_to_thermometer(2, 4) == [T, T, F, F]
    assert code_to_thermometer(4, 4) == [T, T, T, T]


def test_thermometer_monotonic():
    for bits in range(1, 9):
        for code in range(bits):
            lo = code_to_thermometer(code, bits)
            hi = code_to_thermometer(code + 1, bits)
            assert len(lo) == len(hi) == bits
            diffs = [idx for idx, (a, b) in enumerate(zip(lo, hi)) if a != b]
            assert diffs == [code]
            assert not lo[code] and hi[code]


def test_thermometer_out_of_range():
    with pytest.raises(PreconditionError):
        code_to_thermometer(5, 4)
    with pytest.raises(PreconditionError):
        code_to_thermometer(-1, 4)


def test_thermometer_is_value_error():
    # Precondition failures are also `ValueError`s
    with pytest.raises(ValueError):
        code_to_thermometer(3, 2)
