"""Test environment
"""

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from photosens.api.domain import WavelengthSampling


@pytest.fixture
def sampling():
    return WavelengthSampling(380, 5, 81)


@pytest.fixture
def observer(sampling):
    # sampling, field size, age, pupil diameter
    return sampling, 10.0, 32.0, 3.0
