"""
# StrongArm Transient Testbench

Applies a static differential input and a single clock edge to a clocked comparator,
and reports which way it decided.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional

import numpy as np

# Hdl & Simulation Imports
import hdl21 as h
import hdl21.sim as hs
from hdl21.prefix import m, n, PICO
from hdl21.primitives import Vdc, Vpulse

# Local Imports
from ..pvt import Pvt, supply_voltage, volts
from ..simulator import RELTOL, Testbench, TranWaveform

# Tolerance (V) within which a comparator output counts as sitting on a rail
DECISION_TOLERANCE = 1e-4
# Measured nodes, in simulation results
VOP, VON = "xtop.vop", "xtop.von"


class ComparatorDecision(Enum):
    """The decision made by a comparator"""

    NEG = "neg"  # The negative input was larger than the positive input
    POS = "pos"  # The positive input was larger than the negative input


def comparator_decision(vop: float, von: float, vdd: float) -> Optional[ComparatorDecision]:
    """Interpret final comparator output voltages `vop` and `von` as a decision.
    Returns `None` unless each output has settled onto opposite rails."""

    def near(a: float, b: float) -> bool:
        return abs(a - b) <= DECISION_TOLERANCE

    if near(von, 0) and near(vop, vdd):
        return ComparatorDecision.POS
    if near(von, vdd) and near(vop, 0):
        return ComparatorDecision.NEG
    return None


def strongarm_tran_tb(
    dut: h.Module, vinp: Decimal, vinn: Decimal, inverted_clk: bool, pvt: Pvt
) -> h.Module:
    """Create the transient testbench module for comparator `dut`"""

    # Create our testbench
    tb = hs.tb("StrongArmTranTb")
    tb.vdd, tb.clk = h.Signals(2)
    tb.inp, tb.inn = h.Signals(2)
    tb.vop, tb.von = h.Signals(2)

    # Supply and static inputs
    tb.vvdd = Vdc(Vdc.Params(dc=pvt.v, ac=0 * m))(p=tb.vdd, n=tb.VSS)
    tb.vinp = Vdc(Vdc.Params(dc=volts(vinp), ac=0 * m))(p=tb.inp, n=tb.VSS)
    tb.vinn = Vdc(Vdc.Params(dc=volts(vinn), ac=0 * m))(p=tb.inn, n=tb.VSS)

    # A single clock edge, after 10ns. The inverted clock idles high.
    v1, v2 = (pvt.v, 0) if inverted_clk else (0, pvt.v)
    tb.vclk = Vpulse(
        Vpulse.Params(
            v1=v1,
            v2=v2,
            period=1000,
            width=100,
            delay=10 * n,
            rise=100 * PICO,
            fall=100 * PICO,
        )
    )(p=tb.clk, n=tb.VSS)

    # Create the DUT
    tb.dut = dut(
        inp=h.AnonymousBundle(p=tb.inp, n=tb.inn),
        out=h.AnonymousBundle(p=tb.vop, n=tb.von),
        clk=tb.clk,
        vdd=tb.vdd,
        vss=tb.VSS,
    )
    return tb


@dataclass
class StrongArmTranTb(Testbench):
    """
    # StrongArm Transient Testbench

    Compare `vinp` against `vinn` on one clock edge. With `inverted_clk` the clock idles
    high and the comparison happens on its falling edge, as for a Pmos-input StrongArm.
    """

    dut: h.Module
    vinp: Decimal
    vinn: Decimal
    inverted_clk: bool = False
    pvt: Pvt = field(default_factory=Pvt)

    def module(self) -> h.Module:
        return strongarm_tran_tb(self.dut, self.vinp, self.vinn, self.inverted_clk, self.pvt)

    def to_sim(self) -> hs.Sim:
        return hs.Sim(
            tb=self.module(),
            attrs=[
                hs.Tran(tstop=30 * n),
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
            time=np.asarray(tran.data.get("time", []), dtype=float),
            signals={
                "vop": np.asarray(tran.data[VOP], dtype=float),
                "von": np.asarray(tran.data[VON], dtype=float),
            },
        )

    def decision(self, wav: TranWaveform) -> Optional[ComparatorDecision]:
        """Interpret the final values of `wav` as a comparator decision"""
        vdd = float(supply_voltage(self.pvt))
        return comparator_decision(wav.final("vop"), wav.final("von"), vdd)
