"""
# Simulation Test Modes

Most generators here are cheap to export, and expensive to simulate.
Tests of them subclass `SimTest`, and select how far to go via the `--simtestmode` option.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

import hdl21 as h

from ..simulator import HdlSimulator, Simulator


class SimTestMode(Enum):
    """
    # Simulation Test Mode
    More verbosely, "how much detail do we want to test".
    """

    NETLIST = "netlist"  # Export only, do not invoke simulation
    MIN = "min"  # Run the "minimum viable sim", often one setting at one corner
    TYP = "typ"  # Run a "typical amount", often one corner with many settings
    MAX = "max"  # Run everything

    @classmethod
    def parse(cls, value: str) -> "SimTestMode":
        """Parse a command-line value into a `SimTestMode`"""
        for mode in cls:
            if mode.value == value.lower():
                return mode
        raise ValueError(f"Invalid SimTestMode {value}. Must be one of {[m.value for m in cls]}")

    @property
    def simulates(self) -> bool:
        return self != SimTestMode.NETLIST


class SimTest:
    """
    # Simulation Test Base Class

    Pytest collects subclasses named `Test*`, and calls their `test` method with the
    session's `SimTestMode`. That dispatches to one of `netlist`, `min`, `typ` or `max`.
    """

    # The generator under test. Must be set in sub-classes.
    tbgen: Optional[h.Generator] = None
    # Parent directory of all simulation run directories
    scratch = Path("./scratch")

    def default_module(self) -> h.Module:
        """Generate the default-parameterized module."""
        return self.tbgen(self.default_params())

    def default_params(self):
        """The default parameters for `tbgen`. Zero-argument constructed, unless overridden."""
        return self.tbgen.Params()

    def simulator(self) -> Simulator:
        return HdlSimulator()

    def rundir(self, name: str) -> Path:
        """Create, if necessary, and return the run directory named `name`"""
        path = self.scratch / name
        path.mkdir(parents=True, exist_ok=True)
        return path

    def test(self, simtestmode: SimTestMode) -> None:
        """Pytest's primary entry point. Runs our test in `simtestmode`."""
        return getattr(self, simtestmode.value)()

    def netlist(self) -> None:
        """Export our default module to VLSIR. Requires neither a PDK nor a simulator."""
        h.to_proto(self.default_module())

    def min(self) -> None:
        # Default case "down-levels" to netlisting only.
        return self.netlist()

    def typ(self) -> None:
        # Default case "up-levels" to the "MAX" mode.
        return self.max()

    def max(self) -> None:
        raise NotImplementedError
