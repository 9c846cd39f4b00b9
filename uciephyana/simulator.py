"""
# Simulators

The narrow boundary between our testbenches and whatever actually runs them.
A `Simulator` accepts a `Testbench` and a run directory, and returns that testbench's
typed waveforms. `HdlSimulator` runs them through hdl21, a PDK, and vlsirtools.
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

import numpy as np

# Hdl & Simulation Imports
import hdl21.sim as hs
from vlsirtools.spice import ResultFormat, SimOptions, SupportedSimulators, sim as vsp_sim

# Local Imports
from .errors import SimError, PreconditionError
from .logging import logger
from .pvt import Pvt


# Relative tolerance of Spectre's conservative error preset
RELTOL = 1e-4

# Default options. Each job runs in its own copy, with its own `rundir`.
sim_options = SimOptions(
    rundir=Path("./scratch"),
    fmt=ResultFormat.SIM_DATA,
    simulator=SupportedSimulators.SPECTRE,
)


@dataclass
class AcWaveform:
    """Frequency-domain waveform of a single node"""

    freq: np.ndarray  # Frequency points (Hz)
    vout: np.ndarray  # Complex node voltage at each of `freq`


@dataclass
class TranWaveform:
    """Time-domain waveforms, by signal name"""

    time: np.ndarray
    signals: dict

    def final(self, name: str) -> float:
        """The last sample of signal `name`"""
        return float(self.signals[name][-1])


class Testbench(ABC):
    """
    # Testbench
    Anything which can be turned into a PDK-agnostic `hdl21.sim.Sim`,
    and can interpret that sim's results.
    """

    pvt: Pvt

    @abstractmethod
    def to_sim(self) -> hs.Sim:
        """Create our simulation input, without any PDK dependencies."""
        raise NotImplementedError

    @abstractmethod
    def waveform(self, results: Any) -> Any:
        """Extract our typed waveform(s) from simulation `results`."""
        raise NotImplementedError


class Simulator(ABC):
    """# Simulator Interface"""

    @abstractmethod
    def run(self, tb: Testbench, rundir: Path) -> Any:
        """Simulate `tb`, storing any artifacts in `rundir`.
        Returns `tb.waveform(...)` of the results, or raises `SimError`."""
        raise NotImplementedError


class HdlSimulator(Simulator):
    """
    # Hdl21 / VlsirTools Simulator

    Compiles each testbench against `pdk`, adds that PDK's model includes for the
    testbench's process corner, and runs the result through vlsirtools.

    `pdk` is any object with a `compile(module)` function and an `install` attribute
    offering `include(corner)`, e.g. the `sky130` package. If not provided, `sky130`
    is imported on first use, and must have been configured with a site `install`.
    """

    # Elaborating hdl21 modules mutates them, and DUT modules are shared between
    # concurrent jobs. Everything up to netlisting happens under this lock.
    _elab_lock = threading.Lock()

    def __init__(self, pdk: Optional[Any] = None, opts: Optional[SimOptions] = None):
        self.pdk = pdk
        self.opts = opts or sim_options

    def _get_pdk(self) -> Any:
        if self.pdk is None:
            import sky130

            self.pdk = sky130
        if getattr(self.pdk, "install", None) is None:
            msg = f"PDK {self.pdk} has no `install` configured, cannot include its models"
            raise PreconditionError(msg)
        return self.pdk

    def run(self, tb: Testbench, rundir: Path) -> Any:
        pdk = self._get_pdk()
        opts = replace(self.opts, rundir=Path(rundir))

        try:
            with self._elab_lock:
                sim = tb.to_sim()
                pdk.compile(sim.tb)
                sim.add(*pdk.install.include(tb.pvt.p))
                proto = hs.to_proto(sim)

            logger.debug(f"Simulating in {rundir}")
            results = vsp_sim(proto, opts)
            return tb.waveform(results)

        except PreconditionError:
            raise
        except Exception as e:
            raise SimError(f"Simulation in {rundir} failed: {e}") from e
