"""
# Delay Cell Transient Testbench

Drives a tunable delay cell with a single input pulse, and measures its
propagation delay on each edge.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from pydantic.dataclasses import dataclass as pydantic_dataclass

# Hdl & Simulation Imports
import hdl21 as h
import hdl21.sim as hs
from hdl21.prefix import m, n, PICO
from hdl21.primitives import Vdc, Vpulse

# Local Imports
from ..errors import SimError
from ..logging import logger
from ..pvt import Pvt, supply_voltage, volts
from ..simulator import RELTOL, HdlSimulator, Simulator, Testbench, TranWaveform

# Input pulse timing
PULSE_DELAY = 1 * n
PULSE_WIDTH = 1 * n
TSTOP = 3 * n
# Measured output node, in simulation results
VOUT = "xtop.vout"


class EdgeDir(Enum):
    RISING = "rising"
    FALLING = "falling"


@dataclass(frozen=True)
class Edge:
    """A threshold crossing, at time `t`"""

    t: float
    dir: EdgeDir


def edges(time: np.ndarray, signal: np.ndarray, threshold: float) -> List[Edge]:
    """Find each crossing of `threshold` by `signal`, linearly interpolated in time."""

    time = np.asarray(time, dtype=float)
    signal = np.asarray(signal, dtype=float)
    above = signal > threshold

    result = []
    for idx in np.nonzero(above[1:] != above[:-1])[0]:
        t0, t1 = time[idx], time[idx + 1]
        v0, v1 = signal[idx], signal[idx + 1]
        t = t0 + (threshold - v0) * (t1 - t0) / (v1 - v0)
        result.append(Edge(t=float(t), dir=EdgeDir.RISING if above[idx + 1] else EdgeDir.FALLING))
    return result


@pydantic_dataclass
class DelayCellResult:
    """Propagation delays (s) of an inverting delay cell, at one setting"""

    vtune: float
    tr: float  # Input rise time
    tf: float  # Input fall time
    td_hl: float  # Input rising to output falling
    td_lh: float  # Input falling to output rising


def delay_cell_tb(
    dut: h.Module, pvt: Pvt, vtune: Decimal, tr: h.Prefixed, tf: h.Prefixed
) -> h.Module:
    """Create the transient testbench module for delay cell `dut`"""

    # Create our testbench
    tb = hs.tb("DelayCellTb")
    tb.vdd, tb.tune = h.Signals(2)
    tb.vin, tb.vout = h.Signals(2)

    # Supply and tuning voltage
    tb.vvdd = Vdc(Vdc.Params(dc=pvt.v, ac=0 * m))(p=tb.vdd, n=tb.VSS)
    tb.vtune = Vdc(Vdc.Params(dc=volts(vtune), ac=0 * m))(p=tb.tune, n=tb.VSS)

    # A single input pulse
    tb.vpulse = Vpulse(
        Vpulse.Params(
            v1=0,
            v2=pvt.v,
            period=1000,
            width=PULSE_WIDTH,
            delay=PULSE_DELAY,
            rise=tr,
            fall=tf,
        )
    )(p=tb.vin, n=tb.VSS)

    # Create the DUT
    tb.dut = dut(
        tune=tb.tune,
        din=tb.vin,
        dout=tb.vout,
        pwr=h.AnonymousBundle(vdd=tb.vdd, vss=tb.VSS),
    )
    return tb


@dataclass
class DelayCellTb(Testbench):
    """
    # Delay Cell Testbench

    Delays are measured between the 50% points of the input and output transitions.
    """

    dut: h.Module
    vtune: Decimal
    tr: h.Prefixed = 2 * PICO
    tf: h.Prefixed = 2 * PICO
    pvt: Pvt = field(default_factory=Pvt)

    def module(self) -> h.Module:
        return delay_cell_tb(self.dut, self.pvt, self.vtune, self.tr, self.tf)

    def to_sim(self) -> hs.Sim:
        return hs.Sim(
            tb=self.module(),
            attrs=[
                hs.Tran(tstop=TSTOP),
                hs.Literal(
                    f"""
                    simulator lang=spice
                    .temp {self.pvt.t}
                    .option reltol={RELTOL}
                    simulator lang=spectre
                """
                ),
            ],
        )

    def waveform(self, results: hs.SimResult) -> TranWaveform:
        tran = results.an[0]
        return TranWaveform(
            time=np.asarray(tran.data["time"], dtype=float),
            signals={"vout": np.asarray(tran.data[VOUT], dtype=float)},
        )

    def delays(self, wav: TranWaveform) -> DelayCellResult:
        """Measure the propagation delays of `wav`"""

        tr, tf = float(self.tr), float(self.tf)
        vdd = float(supply_voltage(self.pvt))
        found = edges(wav.time, wav.signals["vout"], vdd / 2)
        if len(found) < 2 or found[0].dir != EdgeDir.FALLING or found[1].dir != EdgeDir.RISING:
            msg = f"Delay cell output should fall then rise, got {[e.dir.value for e in found]}"
            raise SimError(msg)

        # 50% points of the input's rising and falling edges
        in_rise = float(PULSE_DELAY) + tr / 2
        in_fall = float(PULSE_DELAY) + tr + float(PULSE_WIDTH) + tf / 2

        return DelayCellResult(
            vtune=float(self.vtune),
            tr=tr,
            tf=tf,
            td_hl=found[0].t - in_rise,
            td_lh=found[1].t - in_fall,
        )


def simulate_delay_cell(
    dut: h.Module,
    vtunes: Sequence[Decimal],
    transitions: Sequence[Tuple[h.Prefixed, h.Prefixed]],
    pvt: Optional[Pvt] = None,
    simulator: Optional[Simulator] = None,
    work_dir: Union[str, Path] = "./scratch",
    max_workers: Optional[int] = None,
) -> List[DelayCellResult]:
    """
    Measure the delays of `dut` at every combination of tuning voltage in `vtunes`
    and (rise, fall) time in `transitions`. Results are ordered by `vtunes`, then `transitions`.
    """

    pvt = pvt or Pvt()
    simulator = simulator or HdlSimulator()
    work_dir = Path(work_dir)

    jobs = []
    for vidx, vtune in enumerate(vtunes):
        for tidx, (tr, tf) in enumerate(transitions):
            tb = DelayCellTb(dut=dut, vtune=vtune, tr=tr, tf=tf, pvt=pvt)
            jobs.append((tb, work_dir / f"vtune{vidx}_trf{tidx}"))

    logger.info(f"Simulating {len(jobs)} delay-cell jobs for {dut.name}")

    def run(job) -> DelayCellResult:
        tb, rundir = job
        return tb.delays(simulator.run(tb, rundir))

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(run, jobs))
