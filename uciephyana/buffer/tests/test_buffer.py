"""
# Inverter & Buffer Tests
"""

import hdl21 as h

from ...mos import MosKind
from ..buffer import Buffer, Inverter, InverterParams


def test_inverter_netlist():
    params = InverterParams(nmos_kind=MosKind.LVT, pmos_kind=MosKind.HVT, nmos_w=500, pmos_w=1_200)
    h.to_proto(Inverter(params))


def test_buffer():
    buf = Buffer(InverterParams())
    assert set(buf.ports) == {"din", "dout", "vdd", "vss"}
    h.to_proto(buf)
