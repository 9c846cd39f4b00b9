"""
# Current-Starved Ring Oscillator
"""

from enum import Enum, auto

# Hdl Imports
import hdl21 as h

# Local Imports
from ..mos import MosKind, nmos, pmos


@h.bundle
class PowerIo:
    """# Supply & Ground"""

    @h.roleset
    class Roles(Enum):
        SUPPLY = auto()
        CONSUMER = auto()

    vdd, vss = h.Signals(2, src=Roles.SUPPLY, dest=Roles.CONSUMER)


@h.paramclass
class CurrentStarvedInverterParams:
    """Current-Starved Inverter Parameters. Dimensions are in nanometers."""

    nmos_kind = h.Param(dtype=MosKind, desc="Nmos Flavor", default=MosKind.NOM)
    pmos_kind = h.Param(dtype=MosKind, desc="Pmos Flavor", default=MosKind.NOM)
    nmos_w = h.Param(dtype=int, desc="Switching Nmos width", default=1_200)
    pmos_w = h.Param(dtype=int, desc="Switching Pmos width", default=2_400)
    starve_w = h.Param(dtype=int, desc="Tune-gated starving Nmos width", default=3_000)
    l = h.Param(dtype=int, desc="Length of all devices", default=150)


def delay_cell_io() -> h.Module:
    """Create a Module with the IO of a tunable delay cell."""

    m = h.Module()
    m.tune = h.Input(desc="Delay tuning voltage")
    m.din = h.Input(desc="Delay cell input")
    m.dout = h.Output(desc="Delayed, inverted output")
    m.pwr = PowerIo(port=True, role=PowerIo.Roles.CONSUMER, desc="Supplies")
    return m


@h.generator
def CurrentStarvedInverter(p: CurrentStarvedInverterParams) -> h.Module:
    """
    # Current-Starved Inverter

    An inverter whose pull-down current flows through an Nmos gated by `tune`.
    Lowering `tune` slows its falling output transitions.
    """

    m = delay_cell_io()
    m.virtual_vss = h.Signal(desc="Source of the switching Nmos")

    m.pu = pmos(p.pmos_kind, p.pmos_w, p.l)(d=m.dout, g=m.din, s=m.pwr.vdd, b=m.pwr.vdd)
    m.pd = nmos(p.nmos_kind, p.nmos_w, p.l)(d=m.dout, g=m.din, s=m.virtual_vss, b=m.pwr.vss)
    m.starve = nmos(p.nmos_kind, p.starve_w, p.l)(
        d=m.virtual_vss, g=m.tune, s=m.pwr.vss, b=m.pwr.vss
    )
    return m


@h.paramclass
class VcoParams:
    """Ring VCO Parameters"""

    stages = h.Param(dtype=int, desc="Number of ring stages. Must be odd.", default=5)
    cell = h.Param(
        dtype=CurrentStarvedInverterParams,
        desc="Delay cell parameters",
        default=CurrentStarvedInverterParams(),
    )


@h.generator
def Vco(p: VcoParams) -> h.Module:
    """
    # Ring VCO

    An odd-length ring of `CurrentStarvedInverter`s sharing a common `tune` voltage.
    The last stage drives `out`, which in turn drives the first.
    """

    if p.stages < 3 or p.stages % 2 == 0:
        raise ValueError(f"Vco {p} must have an odd number of at least 3 stages")

    m = h.Module()
    m.tune = h.Input(desc="Frequency tuning voltage")
    m.out = h.Output(desc="Oscillator output")
    m.pwr = PowerIo(port=True, role=PowerIo.Roles.CONSUMER, desc="Supplies")

    # Internal ring nodes, one between each pair of stages
    m.x = h.Signal(width=p.stages - 1)

    cell = CurrentStarvedInverter(p.cell)
    for idx in range(p.stages):
        din = m.out if idx == 0 else m.x[idx - 1]
        dout = m.out if idx == p.stages - 1 else m.x[idx]
        inst = cell(tune=m.tune, din=din, dout=dout, pwr=m.pwr)
        setattr(m, f"stage{idx}", inst)

    return m
