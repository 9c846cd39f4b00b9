"""
# Segmented Output Driver

A `Driver` is an array of identical `DriverUnit` segments sharing `din` and `dout`.
Each segment has its own pull-up and pull-down enables, so that the driver's
output resistance can be trimmed by thermometer-coding those enables.
"""

from enum import Enum

# Hdl Imports
import hdl21 as h
from hdl21.prefix import n
from hdl21.primitives import PhysicalResistorParams

# Local Imports
from ..mos import MosKind, nmos, pmos


class ResistorConn(Enum):
    """Connection of the legs of a multi-leg resistor"""

    SERIES = "series"
    PARALLEL = "parallel"


@h.paramclass
class ResLegsParams:
    """Multi-Leg Resistor Parameters"""

    legs = h.Param(dtype=int, desc="Number of resistor legs", default=1)
    w = h.Param(dtype=int, desc="Width of each leg (nm)", default=1_000)
    l = h.Param(dtype=int, desc="Length of each leg (nm)", default=1_000)
    conn = h.Param(dtype=ResistorConn, desc="Leg Connection", default=ResistorConn.SERIES)
    model = h.Param(dtype=str, desc="Resistor Model Name", default="rpoly_hp")


@h.generator
def ResLegs(p: ResLegsParams) -> h.Module:
    """# Multi-Leg Resistor
    `p.legs` identical physical resistors, either chained in series or placed in parallel."""

    if p.legs < 1:
        raise ValueError(f"ResLegs {p} must have at least one leg")

    m = h.Module()
    m.p, m.n = h.Ports(2)

    unit = h.PhysicalResistor(
        PhysicalResistorParams(w=p.w * n, l=p.l * n, model=p.model)
    )
    if p.conn == ResistorConn.PARALLEL:
        m.legs = p.legs * unit(p=m.p, n=m.n)
        return m

    # Series: chain the legs through internal nodes `x0`, `x1`, ...
    prev = m.p
    for idx in range(p.legs):
        if idx == p.legs - 1:
            nxt = m.n
        else:
            nxt = h.Signal()
            setattr(m, f"x{idx}", nxt)
        setattr(m, f"leg{idx}", unit(p=prev, n=nxt))
        prev = nxt
    return m


@h.paramclass
class DriverUnitParams:
    """Driver Unit Parameters. Transistor widths are in nanometers."""

    # NOR pre-driver, generating the pull-down enable
    nor_pu_en_w = h.Param(dtype=int, desc="NOR enable Pmos width", default=1_000)
    nor_pu_data_w = h.Param(dtype=int, desc="NOR data Pmos width", default=1_000)
    nor_pd_en_w = h.Param(dtype=int, desc="NOR enable Nmos width", default=500)
    nor_pd_data_w = h.Param(dtype=int, desc="NOR data Nmos width", default=500)
    # Output stage
    driver_pd_w = h.Param(dtype=int, desc="Pull-down driver Nmos width", default=4_000)
    driver_pu_w = h.Param(dtype=int, desc="Pull-up driver Pmos width", default=8_000)
    res_legs = h.Param(dtype=int, desc="Number of legs of each series resistor", default=1)
    res_w = h.Param(dtype=int, desc="Width of the series resistors", default=1_000)
    pd_res_l = h.Param(dtype=int, desc="Length of the pull-down resistor", default=2_000)
    pd_res_conn = h.Param(
        dtype=ResistorConn, desc="Pull-down resistor leg connection", default=ResistorConn.SERIES
    )
    pu_res_l = h.Param(dtype=int, desc="Length of the pull-up resistor", default=2_000)
    pu_res_conn = h.Param(
        dtype=ResistorConn, desc="Pull-up resistor leg connection", default=ResistorConn.SERIES
    )
    # NAND pre-driver, generating the (active-low) pull-up enable
    nand_pu_en_w = h.Param(dtype=int, desc="NAND enable Pmos width", default=1_000)
    nand_pu_data_w = h.Param(dtype=int, desc="NAND data Pmos width", default=1_000)
    nand_pd_en_w = h.Param(dtype=int, desc="NAND enable Nmos width", default=1_000)
    nand_pd_data_w = h.Param(dtype=int, desc="NAND data Nmos width", default=1_000)
    # Device flavors
    nmos_kind = h.Param(dtype=MosKind, desc="Nmos Flavor", default=MosKind.NOM)
    pmos_kind = h.Param(dtype=MosKind, desc="Pmos Flavor", default=MosKind.NOM)


@h.generator
def DriverUnit(p: DriverUnitParams) -> h.Module:
    """
    # Driver Unit

    One segment of the output driver: a pull-up and a pull-down transistor, each in series
    with a resistor to `dout`, and each gated by a pre-driver which combines the data input
    with that leg's enable.

    * The pull-up leg is enabled while `pu_ctl` is high (NAND pre-driver).
    * The pull-down leg is enabled while `pd_ctlb` is low (NOR pre-driver).

    With both legs disabled, the unit presents a high impedance at `dout`.
    """

    m = h.Module()

    # IO Interface
    m.din = h.Input(desc="Data input")
    m.dout = h.Output(desc="Driven output")
    m.pu_ctl = h.Input(desc="Pull-up enable. Active high.")
    m.pd_ctlb = h.Input(desc="Pull-down enable. Active low.")
    m.vdd, m.vss = h.Ports(2)

    # Internal Signals
    m.nor_x, m.nand_x = h.Signals(2)  # Stack nodes of the pre-drivers
    m.pd_en, m.pu_en = h.Signals(2)  # Gates of the output transistors
    m.pd_x, m.pu_x = h.Signals(2)  # Between output transistors and resistors

    def nfet(w: int):
        return nmos(p.nmos_kind, w)

    def pfet(w: int):
        return pmos(p.pmos_kind, w)

    # Pull-down pre-driver: pd_en = NOR(pd_ctlb, din)
    m.nor_pu_en = pfet(p.nor_pu_en_w)(d=m.nor_x, g=m.pd_ctlb, s=m.vdd, b=m.vdd)
    m.nor_pu_data = pfet(p.nor_pu_data_w)(d=m.pd_en, g=m.din, s=m.nor_x, b=m.vdd)
    m.nor_pd_en = nfet(p.nor_pd_en_w)(d=m.pd_en, g=m.pd_ctlb, s=m.vss, b=m.vss)
    m.nor_pd_data = nfet(p.nor_pd_data_w)(d=m.pd_en, g=m.din, s=m.vss, b=m.vss)

    # Pull-up pre-driver: pu_en = NAND(pu_ctl, din)
    m.nand_pu_en = pfet(p.nand_pu_en_w)(d=m.pu_en, g=m.pu_ctl, s=m.vdd, b=m.vdd)
    m.nand_pu_data = pfet(p.nand_pu_data_w)(d=m.pu_en, g=m.din, s=m.vdd, b=m.vdd)
    m.nand_pd_en = nfet(p.nand_pd_en_w)(d=m.nand_x, g=m.pu_ctl, s=m.vss, b=m.vss)
    m.nand_pd_data = nfet(p.nand_pd_data_w)(d=m.pu_en, g=m.din, s=m.nand_x, b=m.vss)

    # Output stage
    m.driver_pd = nfet(p.driver_pd_w)(d=m.pd_x, g=m.pd_en, s=m.vss, b=m.vss)
    m.driver_pu = pfet(p.driver_pu_w)(d=m.pu_x, g=m.pu_en, s=m.vdd, b=m.vdd)
    pd_res = ResLegs(
        ResLegsParams(legs=p.res_legs, w=p.res_w, l=p.pd_res_l, conn=p.pd_res_conn)
    )
    pu_res = ResLegs(
        ResLegsParams(legs=p.res_legs, w=p.res_w, l=p.pu_res_l, conn=p.pu_res_conn)
    )
    m.pd_res = pd_res(p=m.dout, n=m.pd_x)
    m.pu_res = pu_res(p=m.dout, n=m.pu_x)

    return m


@h.paramclass
class DriverParams:
    """Segmented Driver Parameters"""

    unit = h.Param(dtype=DriverUnitParams, desc="Unit Parameters", default=DriverUnitParams())
    num_segments = h.Param(dtype=int, desc="Number of segments per bank", default=8)
    banks = h.Param(dtype=int, desc="Number of banks", default=1)


@h.generator
def Driver(p: DriverParams) -> h.Module:
    """
    # Segmented Driver

    `p.banks` banks of `p.num_segments` independently enabled `DriverUnit`s, all in parallel.
    Segment `i` is controlled by `pu_ctl[i]` and `pd_ctlb[i]`.
    Each bank is flanked by two permanently-disabled dummy units, matching the
    loading seen by its edge segments to that of its interior segments.
    """

    if p.num_segments < 1 or p.banks < 1:
        raise ValueError(f"Driver {p} must have at least one segment and one bank")

    nseg = p.num_segments * p.banks

    m = h.Module()

    # IO Interface
    m.din = h.Input(desc="Data input")
    m.dout = h.Output(desc="Driven output")
    m.pu_ctl = h.Input(width=nseg, desc="Per-segment pull-up enables. Active high.")
    m.pd_ctlb = h.Input(width=nseg, desc="Per-segment pull-down enables. Active low.")
    m.vdd, m.vss = h.Ports(2)

    # Internal Implementation
    unit = DriverUnit(p.unit)
    m.segments = nseg * unit(
        din=m.din,
        dout=m.dout,
        pu_ctl=m.pu_ctl,
        pd_ctlb=m.pd_ctlb,
        vdd=m.vdd,
        vss=m.vss,
    )
    m.dummies = (2 * p.banks) * unit(
        din=m.din,
        dout=m.dout,
        pu_ctl=m.vss,
        pd_ctlb=m.vdd,
        vdd=m.vdd,
        vss=m.vss,
    )
    return m
