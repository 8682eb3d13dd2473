"""This file is used to configure the test environment when running py.test."""

import matplotlib.pyplot as plt
import numpy as np
import pytest

from heatgrid import config
from heatgrid.simulation import SimulationContext, SimulationParameters

# ensure we use the Agg backend, so figures are not displayed
plt.switch_backend("agg")


@pytest.fixture(autouse=True)
def _setup_and_teardown():
    """Helper function adjusting environment before and after tests."""
    # raise all underflow errors
    np.seterr(all="raise", under="ignore")

    # run the actual test without spawning threads for small grids
    with config({"numba.multithreading": "never"}):
        yield

    # clean up open matplotlib figures after the test
    plt.close("all")


@pytest.fixture(autouse=False, name="rng")
def init_random_number_generators():
    """Get a random number generator with a fixed seed."""
    return np.random.default_rng(0)


@pytest.fixture(name="small_context")
def small_context_fixture():
    """Create a seeded simulation on a small grid, which is released afterwards."""
    parameters = SimulationParameters(dim=32, substeps=3)
    context = SimulationContext.from_parameters(parameters)
    yield context
    context.release()


def pytest_configure(config):
    """Add markers to the configuration."""
    config.addinivalue_line("markers", "interactive: test is interactive")
    config.addinivalue_line("markers", "no_cover: test is skipped during coverage")
    config.addinivalue_line("markers", "slow: test runs slowly")


def pytest_addoption(parser):
    """Pytest hook to add command line options parsed by pytest."""
    parser.addoption(
        "--runslow",
        action="store_true",
        default=False,
        help="also run tests marked by `slow`",
    )
    parser.addoption(
        "--runinteractive",
        action="store_true",
        default=False,
        help="also run tests marked by `interactive`",
    )


def pytest_collection_modifyitems(config, items):
    """Pytest hook to filter a collection of tests."""
    # parse options provided to py.test
    running_cov = config.getoption("--cov", default=None)
    runslow = config.getoption("--runslow", default=False)
    runinteractive = config.getoption("--runinteractive", default=False)

    # prepare markers
    skip_cov = pytest.mark.skip(reason="skipped during coverage run")
    skip_slow = pytest.mark.skip(reason="need --runslow option to run")
    skip_interactive = pytest.mark.skip(reason="need --runinteractive option to run")

    # check each test item
    for item in items:
        if "no_cover" in item.keywords and running_cov:
            item.add_marker(skip_cov)
        if "slow" in item.keywords and not runslow:
            item.add_marker(skip_slow)
        if "interactive" in item.keywords and not runinteractive:
            item.add_marker(skip_interactive)
