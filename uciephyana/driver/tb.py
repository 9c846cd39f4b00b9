"""
# Driver Output-Impedance Testbench

Wraps a driver-under-test in an AC testbench which biases its data input,
terminates each of its control lines to one of the two rails, and injects a unit
AC current into its output. The simulated output voltage is then numerically
equal to the driver's output impedance.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Tuple

import numpy as np

# Hdl & Simulation Imports
import hdl21 as h
import hdl21.sim as hs
from hdl21.prefix import m
from hdl21.primitives import Vdc, Idc, R

# Local Imports
from ..errors import PreconditionError
from ..pvt import Pvt, volts
from ..simulator import RELTOL, AcWaveform, Testbench

# Resistance of the weak terminations on each control line
TERMINATION_OHMS = 100
# AC sweep density, in points per decade
POINTS_PER_DECADE = 40
# Name of the measured output node, in simulation results
VOUT = "xtop.vout"


class Rail(Enum):
    """Supply rail to which a control line is terminated"""

    VDD = "vdd"
    VSS = "vss"


@dataclass(frozen=True)
class DriverPorts:
    """The control interface of a driver-under-test"""

    n_pu: int  # Number of pull-up control lines
    n_pd: int  # Number of pull-down control lines
    pd_port: str  # Name of the pull-down control port, `pd_ctlb` or `pd_ctl`

    @property
    def pd_active_low(self) -> bool:
        return self.pd_port == "pd_ctlb"


def driver_ports(dut: h.Module) -> DriverPorts:
    """Discover the control interface of `dut` from its ports.

    A `pd_ctlb` port is an active-low pull-down enable, a `pd_ctl` port is active-high.
    Exactly one of the two must be present."""

    ports = dut.ports
    for name in ("din", "dout", "vdd", "vss", "pu_ctl"):
        if name not in ports:
            raise PreconditionError(f"Driver {dut.name} has no `{name}` port")

    pd_ports = [name for name in ("pd_ctlb", "pd_ctl") if name in ports]
    if len(pd_ports) != 1:
        msg = f"Driver {dut.name} must have exactly one of `pd_ctlb` or `pd_ctl`, found {pd_ports}"
        raise PreconditionError(msg)
    pd_port = pd_ports[0]

    n_pu, n_pd = ports["pu_ctl"].width, ports[pd_port].width
    if n_pu < 1 or n_pd < 1:
        raise PreconditionError(f"Driver {dut.name} has empty control ports")
    return DriverPorts(n_pu=n_pu, n_pd=n_pd, pd_port=pd_port)


def control_rails(
    pu_mask: List[bool], pd_mask: List[bool], pd_active_low: bool = True
) -> Tuple[List[Rail], List[Rail]]:
    """Get the termination rail of each pull-up and pull-down control line.

    Active pull-up lines go to VDD. Active pull-down lines go to VSS if the pull-down
    enables are active-low, and to VDD otherwise. Inactive lines go to the other rail."""

    pu = [Rail.VDD if active else Rail.VSS for active in pu_mask]
    on, off = (Rail.VSS, Rail.VDD) if pd_active_low else (Rail.VDD, Rail.VSS)
    pd = [on if active else off for active in pd_mask]
    return pu, pd


@dataclass
class DriverAcTb(Testbench):
    """
    # Driver AC Testbench

    One output-impedance measurement of `dut`, at data-input bias `vin`,
    with its control lines set by `pu_mask` and `pd_mask`.
    Mask lengths are checked against the DUT's control ports on construction.
    """

    dut: h.Module
    vin: Decimal
    pvt: Pvt
    pu_mask: List[bool]
    pd_mask: List[bool]
    fstart: h.Prefixed
    fstop: h.Prefixed
    ports: DriverPorts = field(init=False, repr=False)

    def __post_init__(self):
        self.ports = driver_ports(self.dut)
        if len(self.pu_mask) != self.ports.n_pu:
            msg = f"Pull-up mask {self.pu_mask} does not match {self.ports.n_pu} pull-up controls"
            raise PreconditionError(msg)
        if len(self.pd_mask) != self.ports.n_pd:
            msg = f"Pull-down mask {self.pd_mask} does not match {self.ports.n_pd} pull-down controls"
            raise PreconditionError(msg)

    def module(self) -> h.Module:
        """Create the testbench module"""
        ports = self.ports

        # Create our testbench
        tb = hs.tb("DriverAcTb")
        tb.vin, tb.vout, tb.vdd = h.Signals(3)
        tb.pu_ctl = h.Signal(width=ports.n_pu)
        tb.pd_ctl = h.Signal(width=ports.n_pd)

        # Bias the data input and supply
        tb.vvin = Vdc(Vdc.Params(dc=volts(self.vin), ac=0 * m))(p=tb.vin, n=tb.VSS)
        tb.vvdd = Vdc(Vdc.Params(dc=self.pvt.v, ac=0 * m))(p=tb.vdd, n=tb.VSS)

        # Terminate each control line
        rails = {Rail.VDD: tb.vdd, Rail.VSS: tb.VSS}
        term = R(R.Params(r=TERMINATION_OHMS))
        pu_rails, pd_rails = control_rails(self.pu_mask, self.pd_mask, ports.pd_active_low)
        for idx, rail in enumerate(pu_rails):
            setattr(tb, f"rpu{idx}", term(p=tb.pu_ctl[idx], n=rails[rail]))
        for idx, rail in enumerate(pd_rails):
            setattr(tb, f"rpd{idx}", term(p=tb.pd_ctl[idx], n=rails[rail]))

        # Unit AC current, from VSS into the output
        tb.iac = Idc(Idc.Params(dc=0, ac=1))(p=tb.VSS, n=tb.vout)

        # Create the DUT
        conns = dict(
            din=tb.vin, dout=tb.vout, pu_ctl=tb.pu_ctl, vdd=tb.vdd, vss=tb.VSS
        )
        conns[ports.pd_port] = tb.pd_ctl
        tb.dut = self.dut(**conns)
        return tb

    def to_sim(self) -> hs.Sim:
        return hs.Sim(
            tb=self.module(),
            attrs=[
                hs.Ac(
                    sweep=hs.LogSweep(
                        start=self.fstart, stop=self.fstop, npts=POINTS_PER_DECADE
                    )
                ),
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

    def waveform(self, results: hs.SimResult) -> AcWaveform:
        ac = results.an[0]
        return AcWaveform(
            freq=np.asarray(ac.freq, dtype=float),
            vout=np.asarray(ac.data[VOUT], dtype=complex),
        )
