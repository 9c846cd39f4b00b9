from .vco import (
    CurrentStarvedInverter,
    CurrentStarvedInverterParams,
    PowerIo,
    Vco,
    VcoParams,
)
from .tb import (
    DelayCellResult,
    DelayCellTb,
    Edge,
    EdgeDir,
    delay_cell_tb,
    edges,
    simulate_delay_cell,
)
