"""
# Driver Characterization Sweep

Simulates a driver's output resistance for every number of enabled pull-up and
pull-down legs, at every bias point of its data input, in parallel.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import List, Optional, Union

# Hdl Imports
import hdl21 as h
from hdl21.prefix import K, G

# Local Imports
from ..encoders import code_to_thermometer
from ..errors import CharacterizationError, DataIntegrityError, PreconditionError
from ..logging import logger
from ..pvt import Pvt, supply_voltage
from ..simulator import HdlSimulator, Simulator
from .tb import DriverAcTb, driver_ports
from .results import (
    Aggregator,
    CharacterizationResult,
    JobFailure,
    LegKind,
    ResistanceCurve,
    extract_resistance,
)


@h.paramclass
class DriverSimParams:
    """Driver Characterization Sweep Parameters"""

    pvt = h.Param(dtype=Pvt, desc="Pvt Conditions", default=Pvt())
    fstart = h.Param(dtype=h.Prefixed, desc="AC Sweep Start Frequency (Hz)", default=1 * K)
    fstop = h.Param(dtype=h.Prefixed, desc="AC Sweep Stop Frequency (Hz)", default=50 * G)
    sweep_points = h.Param(dtype=int, desc="Number of data-input bias points", default=2)
    max_workers = h.Param(
        dtype=Optional[int],
        desc="Maximum number of concurrent simulations. Defaults to the executor's choice.",
        default=None,
    )


@dataclass(frozen=True)
class SimJob:
    """One simulation of the characterization sweep"""

    kind: LegKind
    code: int
    bias_index: int
    pu_mask: List[bool]
    pd_mask: List[bool]

    @property
    def name(self) -> str:
        """Job name, unique within a sweep. Doubles as its run directory."""
        return f"{self.kind.value}_code{self.code}_vin{self.bias_index}"


def bias_voltages(pvt: Pvt, sweep_points: int) -> List[Decimal]:
    """Evenly spaced data-input bias points, from zero to the supply voltage inclusive."""
    if sweep_points < 2:
        raise PreconditionError(f"Driver sweep requires at least 2 bias points, got {sweep_points}")
    v = supply_voltage(pvt)
    return [v * i / (sweep_points - 1) for i in range(sweep_points)]


def driver_jobs(n_pu: int, n_pd: int, sweep_points: int) -> List[SimJob]:
    """
    Enumerate the sweep's jobs: every code of each leg kind, at every bias point.
    The swept leg kind is thermometer-coded, and the other is fully enabled.
    """
    jobs = []
    for kind, bits in ((LegKind.PULL_UP, n_pu), (LegKind.PULL_DOWN, n_pd)):
        for code in range(1, bits + 1):
            mask = code_to_thermometer(code, bits)
            if kind == LegKind.PULL_UP:
                pu_mask, pd_mask = mask, [True] * n_pd
            else:
                pu_mask, pd_mask = [True] * n_pu, mask
            for bias_index in range(sweep_points):
                jobs.append(SimJob(kind, code, bias_index, pu_mask, pd_mask))
    return jobs


def run_job(simulator: Simulator, tb: DriverAcTb, rundir: Path) -> ResistanceCurve:
    """Simulate a single testbench and extract its resistance"""
    return extract_resistance(simulator.run(tb, rundir))


def simulate_driver(
    dut: h.Module,
    params: DriverSimParams,
    simulator: Optional[Simulator] = None,
    work_dir: Union[str, Path] = "./scratch",
    fail_fast: bool = True,
) -> CharacterizationResult:
    """
    # Simulate Driver

    Characterize the output resistance of `dut` for every code of its pull-up and pull-down
    controls, at each of `params.sweep_points` data-input bias points.

    Jobs run on a pool of at most `params.max_workers` threads, each in its own
    subdirectory of `work_dir`. If `fail_fast`, the first failed job cancels all
    not-yet-started jobs and raises a `CharacterizationError`. Otherwise failed jobs
    are listed in the result's `failures`, and their cells of the result are `None`.
    """

    # Check everything we can before dispatching anything
    ports = driver_ports(dut)
    vin = bias_voltages(params.pvt, params.sweep_points)
    jobs = driver_jobs(ports.n_pu, ports.n_pd, params.sweep_points)
    tbs = [
        DriverAcTb(
            dut=dut,
            vin=vin[job.bias_index],
            pvt=params.pvt,
            pu_mask=job.pu_mask,
            pd_mask=job.pd_mask,
            fstart=params.fstart,
            fstop=params.fstop,
        )
        for job in jobs
    ]

    simulator = simulator or HdlSimulator()
    work_dir = Path(work_dir)
    agg = Aggregator(ports.n_pu, ports.n_pd, vin=[float(v) for v in vin])

    logger.info(
        f"Simulating {len(jobs)} jobs for driver {dut.name} "
        f"({ports.n_pu} pull-up, {ports.n_pd} pull-down, {params.sweep_points} bias points) "
        f"on at most {params.max_workers or 'default'} workers"
    )

    with ThreadPoolExecutor(max_workers=params.max_workers) as executor:
        futures = {}
        for job, tb in zip(jobs, tbs):
            logger.debug(f"Dispatching {job.name}")
            future = executor.submit(run_job, simulator, tb, work_dir / job.name)
            futures[future] = job

        for future in as_completed(futures):
            job = futures[future]
            try:
                curve = future.result()
            except Exception as e:
                failure = JobFailure(job.kind, job.code, job.bias_index, error=str(e))
                logger.error(f"Job {job.name} failed: {e}")
                if fail_fast:
                    for pending in futures:
                        pending.cancel()
                    raise CharacterizationError([failure]) from e
                agg.fail(failure)
                continue

            logger.debug(f"Completed {job.name}")
            try:
                agg.add(job.kind, job.code, job.bias_index, curve)
            except DataIntegrityError:
                for pending in futures:
                    pending.cancel()
                raise

    result = agg.result()
    if result.failures:
        logger.warning(f"{len(result.failures)} of {len(jobs)} jobs failed")
    else:
        logger.info(f"Completed all {len(jobs)} jobs")
    return result
