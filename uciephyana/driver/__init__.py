from .driver import (
    Driver,
    DriverParams,
    DriverUnit,
    DriverUnitParams,
    ResLegs,
    ResLegsParams,
    ResistorConn,
)
from .tb import DriverAcTb, DriverPorts, Rail, control_rails, driver_ports
from .results import (
    Aggregator,
    CharacterizationResult,
    JobFailure,
    LegKind,
    ResistanceCurve,
    extract_resistance,
    load_result,
    plot_resistance,
    save_result,
)
from .sweep import DriverSimParams, SimJob, bias_voltages, driver_jobs, simulate_driver
