from decimal import Decimal

import hdl21 as h
from hdl21.pdk import Corner
from hdl21.prefix import m


@h.paramclass
class Pvt:
    """Process, Voltage, and Temperature Condition"""

    p = h.Param(dtype=Corner, desc="Process Corner", default=Corner.TYP)
    v = h.Param(dtype=h.Prefixed, desc="Supply Voltage Value (V)", default=1800 * m)
    t = h.Param(dtype=int, desc="Simulation Temperature (C)", default=25)

    def __repr__(self) -> str:
        return f"Pvt({self.p}, {self.v}, {self.t})"


def supply_voltage(pvt: Pvt) -> Decimal:
    """Supply voltage of `pvt`, as an exact `Decimal` number of volts."""
    return Decimal(str(float(pvt.v)))


def volts(val: Decimal) -> h.Prefixed:
    """Convert a `Decimal` number of volts into an hdl21 `Prefixed` parameter value."""
    return h.Prefixed(number=Decimal(val))
