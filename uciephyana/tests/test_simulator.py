"""
# Simulator Tests
"""

from decimal import Decimal

import pytest
from hdl21.prefix import K, G

from ..errors import PreconditionError, SimError
from ..pvt import Pvt
from ..simulator import HdlSimulator, TranWaveform
from ..driver.tb import DriverAcTb
from ..driver.tests.fakes import stub_driver


class BrokenPdk:
    """A PDK whose compilation always fails"""

    install = object()

    def compile(self, module):
        raise RuntimeError("No devices here")


def driver_tb() -> DriverAcTb:
    return DriverAcTb(
        dut=stub_driver(2, 2),
        vin=Decimal("0.9"),
        pvt=Pvt(),
        pu_mask=[True, True],
        pd_mask=[True, False],
        fstart=1 * K,
        fstop=50 * G,
    )


def test_pdk_without_install(tmp_path):
    with pytest.raises(PreconditionError):
        HdlSimulator(pdk=object()).run(driver_tb(), tmp_path)


def test_failures_become_sim_errors(tmp_path):
    with pytest.raises(SimError) as e:
        HdlSimulator(pdk=BrokenPdk()).run(driver_tb(), tmp_path)
    assert isinstance(e.value.__cause__, RuntimeError)


def test_tran_waveform_final():
    wav = TranWaveform(time=[0.0, 1.0], signals={"vop": [0.0, 1.8]})
    assert wav.final("vop") == 1.8
