"""
Pytest configuration for the LeastCostLSM test suite.

The packages live under src/, which is put on the path so that the
suite also runs from a plain checkout.
"""

import os
import sys

import pytest

src = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))

if src not in sys.path:
    sys.path.insert(0, src)

from LeastCostLSM import default_params, environment, costs  # noqa: E402
from LeastCostLSM.CH2OCoupler import chi_analytical  # noqa: E402


@pytest.fixture
def params():
    """Fresh flat record of the default inputs."""
    return default_params()


@pytest.fixture
def env(params):
    """Default environmental state, 400 ppm, 1 kPa, 25 degC."""
    return environment(params)


@pytest.fixture
def cost(params):
    """Default unit cost ratios, without an absolute scale."""
    return costs(params)


@pytest.fixture
def chi_ref(env, cost):
    """Analytical chi of the default state."""
    return chi_analytical(env.gammastar, env.ca, env.kmm, env.vpd, cost.beta,
                          ns_star=env.ns_star)
