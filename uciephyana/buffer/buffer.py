"""
# Inverters & Buffers
"""

# Hdl Imports
import hdl21 as h

# Local Imports
from ..mos import MosKind, nmos, pmos


@h.paramclass
class InverterParams:
    """Inverter Parameters. Widths are in nanometers."""

    nmos_kind = h.Param(dtype=MosKind, desc="Nmos Flavor", default=MosKind.NOM)
    pmos_kind = h.Param(dtype=MosKind, desc="Pmos Flavor", default=MosKind.NOM)
    nmos_w = h.Param(dtype=int, desc="Nmos Width (nm)", default=1_000)
    pmos_w = h.Param(dtype=int, desc="Pmos Width (nm)", default=1_000)


def buffer_io() -> h.Module:
    """Create a Module with the IO shared by `Inverter` and `Buffer`."""

    m = h.Module()
    m.din = h.Input(desc="Buffer input")
    m.dout = h.Output(desc="(Possibly inverted) buffered output")
    m.vdd, m.vss = h.Ports(2)
    return m


@h.generator
def Inverter(p: InverterParams) -> h.Module:
    """# Cmos Inverter"""

    m = buffer_io()
    m.pu = pmos(p.pmos_kind, p.pmos_w)(d=m.dout, g=m.din, s=m.vdd, b=m.vdd)
    m.pd = nmos(p.nmos_kind, p.nmos_w)(d=m.dout, g=m.din, s=m.vss, b=m.vss)
    return m


@h.generator
def Buffer(p: InverterParams) -> h.Module:
    """# Non-Inverting Buffer
    Pair of identical, cascaded `Inverter`s."""

    m = buffer_io()
    m.x = h.Signal(desc="Inverted intermediate")
    inv = Inverter(p)
    m.inv0 = inv(din=m.din, dout=m.x, vdd=m.vdd, vss=m.vss)
    m.inv1 = inv(din=m.x, dout=m.dout, vdd=m.vdd, vss=m.vss)
    return m
