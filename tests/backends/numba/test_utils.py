import numba as nb
import numpy as np
import pytest

from heatgrid import config
from heatgrid.backends.numba.utils import JIT_COUNT, jit, numba_environment


def test_numba_environment():
    """test the information about the numba setup"""
    env = numba_environment()
    assert env["version"] == nb.__version__
    assert env["fastmath"] is False
    assert env["num_threads"] > 0


def test_jit_decorator():
    """test compiling functions with and without arguments"""
    count = int(JIT_COUNT)

    @jit
    def f(x):
        return 2 * x

    @jit(parallel=True)
    def g(arr):
        total = 0.0
        for i in nb.prange(arr.size):
            total += arr[i]
        return total

    assert int(JIT_COUNT) == count + 2
    assert f(3) == 6
    assert g(np.arange(4.0)) == 6
    # compiled functions are returned unchanged
    assert jit(f) is f


@pytest.mark.parametrize("setting", ["always", "never", "only_local"])
def test_multithreading_policy(setting, monkeypatch):
    """test the resolution of the multithreading setting"""
    monkeypatch.delenv("SLURM_JOB_ID", raising=False)
    monkeypatch.delenv("PBS_JOBID", raising=False)
    monkeypatch.delenv("LSB_JOBID", raising=False)
    with config({"numba.multithreading": setting}):
        assert config.use_multithreading() == (setting != "never")
        if setting == "only_local":
            monkeypatch.setenv("SLURM_JOB_ID", "1")
            assert not config.use_multithreading()

    with config({"numba.multithreading": "sometimes"}), pytest.raises(ValueError):
        config.use_multithreading()
