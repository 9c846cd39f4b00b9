"""
# UCIe PHY Analog

Analog circuit generators for a UCIe PHY, and the simulation sweeps which characterize them.
"""

from .errors import CharacterizationError, DataIntegrityError, PreconditionError, SimError
from .encoders import code_to_thermometer
from .mos import MosKind
from .pvt import Pvt, supply_voltage
from .simulator import AcWaveform, HdlSimulator, Simulator, Testbench, TranWaveform
