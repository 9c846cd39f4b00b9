"""
# StrongArm Comparator
"""

from enum import Enum

# Hdl Imports
import hdl21 as h
from hdl21 import Diff

# Local Imports
from ..mos import MosKind, nmos, pmos
from ..buffer import Buffer, InverterParams


class InputKind(Enum):
    """Device type of the comparator's input pair"""

    N = "n"  # Nmos input pair, compares on the rising clock edge
    P = "p"  # Pmos input pair, compares on the falling clock edge

    @property
    def is_n(self) -> bool:
        return self == InputKind.N

    @property
    def is_p(self) -> bool:
        return self == InputKind.P


@h.paramclass
class StrongArmParams:
    """StrongArm Parameters. Widths are in nanometers."""

    nmos_kind = h.Param(dtype=MosKind, desc="Nmos Flavor", default=MosKind.NOM)
    pmos_kind = h.Param(dtype=MosKind, desc="Pmos Flavor", default=MosKind.NOM)
    half_tail_w = h.Param(dtype=int, desc="Width of each half of the tail device", default=1_000)
    input_pair_w = h.Param(dtype=int, desc="Width of each input pair device", default=1_000)
    inv_input_w = h.Param(
        dtype=int, desc="Width of the latch devices stacked on the input pair", default=1_000
    )
    inv_precharge_w = h.Param(
        dtype=int, desc="Width of the latch devices on the precharge rail", default=1_000
    )
    precharge_w = h.Param(dtype=int, desc="Width of the precharge devices", default=1_000)
    input_kind = h.Param(dtype=InputKind, desc="Input pair device type", default=InputKind.N)


def comparator_io() -> h.Module:
    """Create a Module with the IO of a clocked differential comparator."""

    m = h.Module()
    m.inp = Diff(port=True, role=Diff.Roles.SINK, desc="Differential input")
    m.out = Diff(port=True, role=Diff.Roles.SOURCE, desc="Differential output")
    m.clk = h.Input(desc="Clock")
    m.vdd, m.vss = h.Ports(2)
    return m


@h.generator
def StrongArm(p: StrongArmParams) -> h.Module:
    """
    # StrongArm Comparator

    With an Nmos input pair, the comparator precharges its outputs high while `clk` is low,
    and resolves on its rising edge. A Pmos input pair mirrors this: outputs precharge low
    while `clk` is high, and resolve on its falling edge.
    """

    m = comparator_io()

    # Internal Signals
    m.tail = h.Signal(desc="Drain of the tail devices")
    m.int = Diff(desc="Drains of the input pair")

    # Sort out which devices and rails play which role
    if p.input_kind.is_n:
        input_rail, precharge_rail = m.vss, m.vdd

        def input_fet(w: int):
            return nmos(p.nmos_kind, w)

        def precharge_fet(w: int):
            return pmos(p.pmos_kind, w)

    else:
        input_rail, precharge_rail = m.vdd, m.vss

        def input_fet(w: int):
            return pmos(p.pmos_kind, w)

        def precharge_fet(w: int):
            return nmos(p.nmos_kind, w)

    # Clocked tail, in two halves
    m.tail_halves = 2 * input_fet(p.half_tail_w)(
        d=m.tail, g=m.clk, s=input_rail, b=input_rail
    )

    # Input pair
    pair = input_fet(p.input_pair_w)
    m.inpp = pair(d=m.int.n, g=m.inp.p, s=m.tail, b=input_rail)
    m.inpn = pair(d=m.int.p, g=m.inp.n, s=m.tail, b=input_rail)

    # Cross-coupled latch
    inv_input = input_fet(p.inv_input_w)
    m.inv_inp = inv_input(d=m.out.n, g=m.out.p, s=m.int.n, b=input_rail)
    m.inv_inn = inv_input(d=m.out.p, g=m.out.n, s=m.int.p, b=input_rail)
    inv_precharge = precharge_fet(p.inv_precharge_w)
    m.inv_prep = inv_precharge(d=m.out.n, g=m.out.p, s=precharge_rail, b=precharge_rail)
    m.inv_pren = inv_precharge(d=m.out.p, g=m.out.n, s=precharge_rail, b=precharge_rail)

    # Precharge devices, on both the outputs and the input-pair drains
    precharge = precharge_fet(p.precharge_w)
    m.pre_outp = precharge(d=m.out.p, g=m.clk, s=precharge_rail, b=precharge_rail)
    m.pre_outn = precharge(d=m.out.n, g=m.clk, s=precharge_rail, b=precharge_rail)
    m.pre_intp = precharge(d=m.int.p, g=m.clk, s=precharge_rail, b=precharge_rail)
    m.pre_intn = precharge(d=m.int.n, g=m.clk, s=precharge_rail, b=precharge_rail)

    return m


@h.paramclass
class StrongArmWithOutputBuffersParams:
    """StrongArm with Output Buffers Parameters"""

    strongarm = h.Param(dtype=StrongArmParams, desc="Comparator", default=StrongArmParams())
    buffer = h.Param(dtype=InverterParams, desc="Output buffer inverters", default=InverterParams())


@h.generator
def StrongArmWithOutputBuffers(p: StrongArmWithOutputBuffersParams) -> h.Module:
    """# StrongArm Comparator, with a `Buffer` on each of its outputs"""

    m = comparator_io()
    m.sa_out = Diff(desc="Unbuffered comparator output")

    m.sa = StrongArm(p.strongarm)(
        inp=m.inp, out=m.sa_out, clk=m.clk, vdd=m.vdd, vss=m.vss
    )
    buf = Buffer(p.buffer)
    m.bufp = buf(din=m.sa_out.p, dout=m.out.p, vdd=m.vdd, vss=m.vss)
    m.bufn = buf(din=m.sa_out.n, dout=m.out.n, vdd=m.vdd, vss=m.vss)

    return m
