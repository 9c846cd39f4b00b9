import pytest

from .sim_test_mode import SimTestMode


def test_parse():
    assert SimTestMode.parse("netlist") == SimTestMode.NETLIST
    assert SimTestMode.parse("MAX") == SimTestMode.MAX
    assert not SimTestMode.NETLIST.simulates
    assert SimTestMode.TYP.simulates
    with pytest.raises(ValueError):
        SimTestMode.parse("everything")
