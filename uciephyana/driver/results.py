"""
# Driver Characterization Results

Extraction of resistance from simulated impedance, the per-job result and failure types,
aggregation of per-job results into a `CharacterizationResult`, and its persistence and plotting.
"""

import pickle
from dataclasses import asdict, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

import numpy as np
import matplotlib.pyplot as plt
from pydantic.dataclasses import dataclass

# Local Imports
from ..errors import DataIntegrityError, PreconditionError
from ..logging import logger
from ..simulator import AcWaveform


class LegKind(Enum):
    """The family of driver legs swept by a job"""

    PULL_UP = "pu"
    PULL_DOWN = "pd"


@dataclass
class ResistanceCurve:
    """Resistance (Ohms) at each frequency (Hz)"""

    freq: List[float]
    r: List[float]


def extract_resistance(wav: AcWaveform) -> ResistanceCurve:
    """
    Extract the parallel resistance from impedance waveform `wav`.

    The driver output is modeled as a resistor in parallel with parasitic capacitance.
    The real part of the admittance `1/Z` is that resistor's conductance, independent
    of frequency, while the real part of `Z` itself rolls off with the capacitance.
    """
    z = np.asarray(wav.vout, dtype=complex)
    r = 1 / np.real(1 / z)
    return ResistanceCurve(freq=[float(f) for f in wav.freq], r=[float(x) for x in r])


@dataclass
class JobFailure:
    """A failed simulation job, and the reason it failed"""

    kind: LegKind
    code: int
    bias_index: int
    error: str

    @property
    def name(self) -> str:
        return f"{self.kind.value}_code{self.code}_vin{self.bias_index}"


@dataclass
class CharacterizationResult:
    """
    # Driver Characterization Result

    `r_pu[code - 1][bias_index]` is the resistance curve, over `freq`, of the pull-up legs
    with `code` of them enabled and the data input biased at `vin[bias_index]`.
    `r_pd` is the same for the pull-down legs. Cells of failed jobs are `None`.
    """

    r_pu: List[List[Optional[List[float]]]]
    r_pd: List[List[Optional[List[float]]]]
    freq: List[float]
    vin: List[float]
    pu_codes: List[int]
    pd_codes: List[int]
    failures: List[JobFailure] = field(default_factory=list)

    def table(self, kind: LegKind) -> List[List[Optional[List[float]]]]:
        return self.r_pu if kind == LegKind.PULL_UP else self.r_pd

    def codes(self, kind: LegKind) -> List[int]:
        return self.pu_codes if kind == LegKind.PULL_UP else self.pd_codes

    def resistance(self, kind: LegKind, code: int, bias_index: int) -> Optional[List[float]]:
        """Get the resistance curve for `code` enabled `kind` legs, at bias point `bias_index`."""
        if code < 1 or code > len(self.codes(kind)):
            raise PreconditionError(f"No {kind.name} code {code} in this result")
        return self.table(kind)[code - 1][bias_index]


class Aggregator:
    """
    # Result Aggregator

    Folds completed jobs into a `CharacterizationResult`.
    Each job owns exactly one cell of the result tables, keyed by its
    (leg kind, code, bias index). Every job must report the same frequency vector.
    """

    def __init__(self, n_pu: int, n_pd: int, vin: List[float]):
        self.vin = list(vin)
        self.r_pu = [[None] * len(vin) for _ in range(n_pu)]
        self.r_pd = [[None] * len(vin) for _ in range(n_pd)]
        self.freq: Optional[List[float]] = None
        self.failures: List[JobFailure] = []

    def add(self, kind: LegKind, code: int, bias_index: int, curve: ResistanceCurve) -> None:
        """Record the resistance `curve` for job (`kind`, `code`, `bias_index`)"""

        if self.freq is None:
            self.freq = curve.freq
        elif not np.array_equal(self.freq, curve.freq):
            msg = f"Frequency vector of job {kind.value}_code{code}_vin{bias_index} differs from those before it"
            logger.error(msg)
            raise DataIntegrityError(msg)

        table = self.r_pu if kind == LegKind.PULL_UP else self.r_pd
        if table[code - 1][bias_index] is not None:
            msg = f"Job {kind.value}_code{code}_vin{bias_index} reported more than once"
            logger.error(msg)
            raise DataIntegrityError(msg)
        table[code - 1][bias_index] = curve.r

    def fail(self, failure: JobFailure) -> None:
        self.failures.append(failure)

    def result(self) -> CharacterizationResult:
        return CharacterizationResult(
            r_pu=self.r_pu,
            r_pd=self.r_pd,
            freq=self.freq or [],
            vin=self.vin,
            pu_codes=list(range(1, len(self.r_pu) + 1)),
            pd_codes=list(range(1, len(self.r_pd) + 1)),
            failures=self.failures,
        )


def save_result(result: CharacterizationResult, path: Union[str, Path]) -> None:
    """Pickle `result` to `path`"""
    with open(path, "wb") as f:
        pickle.dump(asdict(result), f)


def load_result(path: Union[str, Path]) -> CharacterizationResult:
    """Load a `CharacterizationResult` pickled by `save_result`"""
    with open(path, "rb") as f:
        return CharacterizationResult(**pickle.load(f))


def plot_resistance(
    result: CharacterizationResult, kind: LegKind, freq: float, fname: Union[str, Path]
) -> None:
    """Plot resistance versus code of `kind` legs, one trace per bias point,
    at the simulated frequency nearest `freq`. Save the figure to file `fname`."""

    if not result.freq:
        raise ValueError("Cannot plot a result without any frequency points")
    fidx = int(np.argmin(np.abs(np.array(result.freq) - freq)))
    codes = np.array(result.codes(kind))
    table = result.table(kind)

    fig, ax = plt.subplots()
    for bias_index, vin in enumerate(result.vin):
        r = np.array(
            [np.nan if row[bias_index] is None else row[bias_index][fidx] for row in table]
        )
        ax.plot(codes, r, marker="o", label=f"vin={vin:.3f}V")

    # Set up all the other data on our plot
    ax.grid()
    ax.set_title(f"Driver {kind.name} Resistance @ {result.freq[fidx]:.3g}Hz")
    ax.set_xlabel("Code")
    ax.set_ylabel("Resistance (Ohms)")
    ax.legend()

    # And save it to file
    fig.savefig(fname)
    plt.close(fig)
