import numpy as np
import pytest
from matplotlib import pyplot as plt

from photosens.api.plotting.basic import (
    population_plot,
    sensitivity_plot,
    simple_plotting_function,
)
from photosens.core.receptor import HumanReceptor
from photosens.err import InvalidConfigurationError


@pytest.fixture
def receptor(sampling):
    receptor = HumanReceptor(sampling=sampling)
    receptor.make_stochastic(n_samples=5)
    receptor.make_parametric("dlens", values=[-10.0, 0.0, 10.0])
    return receptor


def test_simple_plotting_function():
    ys = np.random.rand(3, 10)
    ax = simple_plotting_function(1, ys, labels=["a", "b", "c"])
    assert len(ax.lines) == 3
    plt.close()


def test_sensitivity_plot():
    wls = np.linspace(400, 700, 31)
    ax = sensitivity_plot(wls, np.random.rand(2, 31), labels=["S", "L"])
    assert len(ax.lines) == 2
    assert ax.get_xlabel() == "Wavelength [nm]"
    assert ax.get_legend() is not None
    plt.close()


def test_population_plot():
    wls = np.linspace(400, 700, 31)
    ax = population_plot(wls, np.random.rand(10, 2, 31), labels=["S", "L"])
    assert len(ax.lines) == 2
    assert len(ax.collections) == 2
    plt.close()

    with pytest.raises(ValueError):
        population_plot(wls, np.random.rand(2, 31))


@pytest.mark.parametrize("which, n_lines", [
    ("nominal", 5),
    ("stochastic", 5),
    ("parametric", 3),
])
def test_receptor_plot(receptor, which, n_lines):
    fig, ax = plt.subplots()
    ax = receptor.plot(which=which, ax=ax)
    assert len(ax.lines) == n_lines
    plt.close(fig)


def test_receptor_plot_parametric_by_label(receptor):
    ax = receptor.plot(which="parametric", receptor="Mel")
    assert ax.get_title() == "Mel"
    plt.close()


def test_receptor_plot_invalid(receptor, sampling):
    with pytest.raises(InvalidConfigurationError):
        receptor.plot(which="spectral")
    with pytest.raises(InvalidConfigurationError):
        receptor.plot(name="photopic")
    with pytest.raises(InvalidConfigurationError):
        HumanReceptor(sampling=sampling).plot(which="stochastic")
    plt.close("all")
