"""
# Driver Result Tests
"""

import numpy as np
import pytest

from ...errors import DataIntegrityError, PreconditionError
from ...simulator import AcWaveform
from ..results import (
    Aggregator,
    LegKind,
    ResistanceCurve,
    extract_resistance,
    load_result,
    plot_resistance,
    save_result,
)


def test_extract_parallel_rc():
    """Resistance of an ideal R||C is independent of frequency"""

    r, c = 1000.0, 1e-15
    freq = np.logspace(6, 10, 41)
    z = r / (1 + 2j * np.pi * freq * r * c)
    curve = extract_resistance(AcWaveform(freq=freq, vout=z))

    assert curve.freq == list(freq)
    assert np.allclose(curve.r, r, rtol=1e-9)
    # While the real part of the impedance does not
    assert np.real(z[-1]) < 0.999 * r


def small_result():
    agg = Aggregator(n_pu=2, n_pd=1, vin=[0.0, 1.8])
    freq = [1e6, 1e9]
    for bias_index in (0, 1):
        for code in (1, 2):
            agg.add(LegKind.PULL_UP, code, bias_index, ResistanceCurve(freq, [100.0 / code] * 2))
        agg.add(LegKind.PULL_DOWN, 1, bias_index, ResistanceCurve(freq, [50.0, 51.0]))
    return agg.result()


def test_aggregate():
    result = small_result()
    assert result.freq == [1e6, 1e9]
    assert result.pu_codes == [1, 2]
    assert result.pd_codes == [1]
    assert result.resistance(LegKind.PULL_UP, 2, 1) == [50.0, 50.0]
    assert result.resistance(LegKind.PULL_DOWN, 1, 0) == [50.0, 51.0]
    with pytest.raises(PreconditionError):
        result.resistance(LegKind.PULL_DOWN, 2, 0)


def test_aggregate_duplicate():
    agg = Aggregator(n_pu=1, n_pd=1, vin=[0.0, 1.8])
    curve = ResistanceCurve([1e6], [100.0])
    agg.add(LegKind.PULL_UP, 1, 0, curve)
    with pytest.raises(DataIntegrityError):
        agg.add(LegKind.PULL_UP, 1, 0, curve)


def test_aggregate_frequency_mismatch():
    agg = Aggregator(n_pu=1, n_pd=1, vin=[0.0, 1.8])
    agg.add(LegKind.PULL_UP, 1, 0, ResistanceCurve([1e6, 1e7], [100.0, 100.0]))
    with pytest.raises(DataIntegrityError):
        agg.add(LegKind.PULL_UP, 1, 1, ResistanceCurve([1e6, 2e7], [100.0, 100.0]))


def test_save_load(tmp_path):
    result = small_result()
    path = tmp_path / "driver.pkl"
    save_result(result, path)
    assert load_result(path) == result


def test_plot(tmp_path):
    fname = tmp_path / "driver_pu.png"
    plot_resistance(small_result(), LegKind.PULL_UP, 1e8, fname)
    assert fname.exists()
