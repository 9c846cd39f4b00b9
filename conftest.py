import pytest
from uciephyana.tests.sim_test_mode import SimTestMode


def pytest_addoption(parser):
    parser.addoption(
        "--simtestmode",
        action="store",
        default=SimTestMode.NETLIST.value,
        help=f"Simulation test mode. One of {[m.value for m in SimTestMode]}.",
    )


@pytest.fixture(scope="session")
def simtestmode(request) -> SimTestMode:
    """Get the SimTestMode command-line option, and convert it to our enum."""
    try:
        return SimTestMode.parse(request.config.getoption("--simtestmode"))
    except ValueError as e:
        raise pytest.UsageError(str(e)) from e
