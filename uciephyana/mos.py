"""
# Mos Device Flavors

Generators in this package are written against hdl21's PDK-agnostic `Nmos` and `Pmos`
primitives. `MosKind` selects the threshold flavor, which a PDK's `compile` maps
onto its own device models.
"""

from enum import Enum
from typing import Optional

import hdl21 as h
from hdl21.prefix import n
from hdl21.primitives import MosParams


class MosKind(Enum):
    """Mos Threshold Flavor"""

    NOM = "nom"
    LVT = "lvt"
    HVT = "hvt"

    @property
    def vth(self) -> h.MosVth:
        return {
            MosKind.NOM: h.MosVth.STD,
            MosKind.LVT: h.MosVth.LOW,
            MosKind.HVT: h.MosVth.HIGH,
        }[self]


def _params(kind: MosKind, w: int, l: Optional[int]) -> MosParams:
    if l is None:
        return MosParams(w=w * n, vth=kind.vth)
    return MosParams(w=w * n, l=l * n, vth=kind.vth)


def nmos(kind: MosKind, w: int, l: Optional[int] = None):
    """Create an `Nmos` of flavor `kind`, width `w` and (optionally) length `l`, in nanometers."""
    return h.Nmos(_params(kind, w, l))


def pmos(kind: MosKind, w: int, l: Optional[int] = None):
    """Create a `Pmos` of flavor `kind`, width `w` and (optionally) length `l`, in nanometers."""
    return h.Pmos(_params(kind, w, l))
