from .buffer import Inverter, Buffer, InverterParams
