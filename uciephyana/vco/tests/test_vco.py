"""
# VCO & Delay Cell Tests
"""

from decimal import Decimal
from pathlib import Path

import numpy as np
import pytest

import hdl21 as h
from hdl21.prefix import PICO

from ...errors import SimError
from ...simulator import Simulator, TranWaveform
from ...tests.sim_test_mode import SimTest
from ..vco import CurrentStarvedInverter, CurrentStarvedInverterParams, Vco, VcoParams
from ..tb import (
    PULSE_DELAY,
    PULSE_WIDTH,
    DelayCellTb,
    EdgeDir,
    edges,
    simulate_delay_cell,
)


def model_delays(vtune: float):
    """Delays (s) of the modeled delay cell. Falling output slows as `vtune` drops."""
    return 10e-12 + 20e-12 * (1.8 - vtune), 15e-12


class DelayModelSimulator(Simulator):
    """Returns an ideal inverted and delayed copy of each testbench's input pulse"""

    def __init__(self):
        self.rundirs = []

    def run(self, tb: DelayCellTb, rundir: Path) -> TranWaveform:
        self.rundirs.append(Path(rundir))
        td_hl, td_lh = model_delays(float(tb.vtune))
        tr, tf = float(tb.tr), float(tb.tf)
        out_fall = float(PULSE_DELAY) + tr / 2 + td_hl
        out_rise = float(PULSE_DELAY) + tr + float(PULSE_WIDTH) + tf / 2 + td_lh

        ramp = 1e-12
        time = np.linspace(0, 3e-9, 30_001)
        knots = [0, out_fall - ramp, out_fall + ramp, out_rise - ramp, out_rise + ramp, 3e-9]
        vout = np.interp(time, knots, [1.8, 1.8, 0, 0, 1.8, 1.8])
        return TranWaveform(time=time, signals={"vout": vout})


def test_edges():
    time = np.array([0.0, 1.0, 2.0, 3.0, 4.0])
    signal = np.array([0.0, 1.0, 1.0, 0.0, 0.0])
    found = edges(time, signal, 0.5)
    assert [e.dir for e in found] == [EdgeDir.RISING, EdgeDir.FALLING]
    assert found[0].t == pytest.approx(0.5)
    assert found[1].t == pytest.approx(2.5)
    assert edges(time, np.zeros(5), 0.5) == []


def test_current_starved_inverter():
    inv = CurrentStarvedInverter(CurrentStarvedInverterParams())
    assert {"tune", "din", "dout"} <= set(inv.ports)
    assert inv.pwr.port
    h.to_proto(inv)


def test_vco():
    vco = Vco(VcoParams(stages=3))
    assert len([name for name in vco.instances if name.startswith("stage")]) == 3
    h.to_proto(vco)


def test_vco_bad_stages():
    with pytest.raises(ValueError):
        Vco(VcoParams(stages=4))
    with pytest.raises(ValueError):
        Vco(VcoParams(stages=1))


def test_delays():
    dut = CurrentStarvedInverter(CurrentStarvedInverterParams())
    tb = DelayCellTb(dut=dut, vtune=Decimal("1.2"), tr=10 * PICO, tf=20 * PICO)
    result = tb.delays(DelayModelSimulator().run(tb, Path("unused")))

    td_hl, td_lh = model_delays(1.2)
    assert result.td_hl == pytest.approx(td_hl, abs=1e-13)
    assert result.td_lh == pytest.approx(td_lh, abs=1e-13)
    assert result.tr == pytest.approx(10e-12)


def test_delays_without_edges():
    dut = CurrentStarvedInverter(CurrentStarvedInverterParams())
    tb = DelayCellTb(dut=dut, vtune=Decimal("1.8"))
    flat = TranWaveform(time=np.linspace(0, 3e-9, 11), signals={"vout": np.full(11, 1.8)})
    with pytest.raises(SimError):
        tb.delays(flat)


def test_delay_sweep(tmp_path):
    sim = DelayModelSimulator()
    dut = CurrentStarvedInverter(CurrentStarvedInverterParams())
    vtunes = [Decimal("1.8"), Decimal("1.2"), Decimal("0.9")]
    transitions = [(2 * PICO, 2 * PICO), (20 * PICO, 10 * PICO)]
    results = simulate_delay_cell(dut, vtunes, transitions, simulator=sim, work_dir=tmp_path)

    assert len(results) == 6
    assert [r.vtune for r in results] == [1.8, 1.8, 1.2, 1.2, 0.9, 0.9]
    assert set(sim.rundirs) == {
        tmp_path / f"vtune{v}_trf{t}" for v in range(3) for t in range(2)
    }
    # Lower tuning voltages are slower
    hl = [r.td_hl for r in results[::2]]
    assert hl == sorted(hl)


class TestDelayCell(SimTest):
    """Current-Starved Inverter Delay"""

    tbgen = CurrentStarvedInverter

    def sweep(self, vtunes, name: str):
        transitions = [(2 * PICO, 2 * PICO)]
        rundir = self.rundir(name)
        results = simulate_delay_cell(
            self.default_module(), vtunes, transitions, simulator=self.simulator(), work_dir=rundir
        )
        for result in results:
            assert result.td_hl > 0 and result.td_lh > 0
        return results

    def min(self):
        return self.sweep([Decimal("1.8")], "delay_cell.min")

    def max(self):
        results = self.sweep([Decimal("1.8"), Decimal("1.2"), Decimal("0.9")], "delay_cell.max")
        hl = [r.td_hl for r in results]
        assert hl == sorted(hl)
