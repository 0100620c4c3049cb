import numpy as np
import pandas as pd
import pytest

from photosens.api import resampling
from photosens.api.assemble import MATRIX_NAMES
from photosens.api.observer import HUMAN_TRANSFORMS
from photosens.api.resampling import ResampledPopulation, check_n_samples, resample
from photosens.err import InvalidConfigurationError, TransformError


def test_population_length_and_shapes(observer):
    population = resample(*observer, n_samples=7)
    assert isinstance(population, ResampledPopulation)
    assert len(population) == 7
    for bundle in population:
        for T in bundle.matrices().values():
            assert T.shape == (5, observer[0].count)
    for name in MATRIX_NAMES:
        assert population.stack(name).shape == (7, 5, observer[0].count)


def test_single_draw(observer):
    population = resample(*observer, n_samples=1)
    assert len(population) == 1


def test_five_draws(observer):
    population = resample(*observer, n_samples=5)
    assert len(population) == 5
    dlens = np.array([bundle.ind_diff_params["cones"].dlens for bundle in population])
    assert np.all(np.isfinite(dlens))
    assert np.unique(dlens).size == 5


def test_shared_and_fixed_params(observer):
    population = resample(*observer, n_samples=10, seed=7)
    for bundle in population:
        params = bundle.ind_diff_params
        assert params["cones"].dlens == params["melanopsin"].dlens == params["rod"].dlens
        assert params["cones"].dmac == params["melanopsin"].dmac == params["rod"].dmac
        for name in ["melanopsin", "rod"]:
            np.testing.assert_array_equal(params[name].dphotopigment, [0.0])
            np.testing.assert_array_equal(params[name].lambda_max_shift, [0.0])


def test_reproducible_runs(observer):
    first = resample(*observer, n_samples=6, algorithm="mt19937", seed=21)
    second = resample(*observer, n_samples=6, algorithm="mt19937", seed=21)
    for a, b in zip(first, second):
        for name in a.ind_diff_params:
            assert a.ind_diff_params[name] == b.ind_diff_params[name]
    np.testing.assert_array_equal(first.stack(), second.stack())

    other = resample(*observer, n_samples=6, algorithm="mt19937", seed=22)
    assert not np.array_equal(first.stack(), other.stack())


def test_draw_order_is_stream_order(observer):
    # a longer run starts with the draws of a shorter one
    short = resample(*observer, n_samples=3, seed=1)
    long = resample(*observer, n_samples=6, seed=1)
    np.testing.assert_array_equal(short.stack(), long.stack()[:3])


def test_parallel_matches_sequential(observer):
    sequential = resample(*observer, n_samples=4, seed=3)
    parallel = resample(*observer, n_samples=4, seed=3, n_jobs=2)
    for name in MATRIX_NAMES:
        np.testing.assert_array_equal(sequential.stack(name), parallel.stack(name))


@pytest.mark.parametrize("n_samples", [0, -3, 10.5, "10", None, True])
def test_invalid_n_samples(observer, monkeypatch, n_samples):
    def no_streams(*args, **kwargs):
        raise AssertionError("streams must not be created")

    monkeypatch.setattr(resampling, "StreamBank", no_streams)
    with pytest.raises(InvalidConfigurationError):
        resample(*observer, n_samples=n_samples)


def test_invalid_algorithm(observer, monkeypatch):
    def no_streams(*args, **kwargs):
        raise AssertionError("streams must not be created")

    monkeypatch.setattr(resampling, "StreamBank", no_streams)
    with pytest.raises(InvalidConfigurationError):
        resample(*observer, n_samples=5, algorithm="mrg31k3p")


def test_check_n_samples():
    check_n_samples(1)
    check_n_samples(np.int64(1000))
    with pytest.raises(ValueError):
        check_n_samples(0)


def test_transform_failure_names_draw(observer):
    calls = {"rod": 0}

    def failing_rod(sampling, field_size, age, pupil_diameter, params):
        calls["rod"] += 1
        if calls["rod"] == 3:
            raise ValueError("out of domain")
        return HUMAN_TRANSFORMS["rod"](sampling, field_size, age, pupil_diameter, params)

    transforms = dict(HUMAN_TRANSFORMS, rod=failing_rod)
    with pytest.raises(TransformError) as excinfo:
        resample(*observer, n_samples=5, transforms=transforms)
    assert excinfo.value.draw_index == 3
    assert "Draw 3" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, ValueError)
    # the run stops at the failing draw
    assert calls["rod"] == 3


def test_population_frames(observer):
    population = resample(*observer, n_samples=3)
    df = population.to_frame("energy")
    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == ["draw", "receptor", "wavelengths", "value"]
    assert len(df) == 3 * 5 * observer[0].count
    assert set(df["receptor"]) == {"L", "M", "S", "Mel", "Rod"}
    first = df[(df["draw"] == 2) & (df["receptor"] == "M")]["value"].to_numpy()
    np.testing.assert_array_equal(first, population[1].energy[1])

    params = population.params_frame()
    assert len(params) == 3 * 3
    assert set(params["receptor_class"]) == {"cones", "melanopsin", "rod"}
    assert params.groupby("draw")["dlens"].nunique().eq(1).all()


def test_stack_unknown_name(observer):
    population = resample(*observer, n_samples=1)
    with pytest.raises(KeyError):
        population.stack("photopic")


def test_verbose_progress(observer, capsys):
    resample(*observer, n_samples=3, verbose=True)
    captured = capsys.readouterr()
    assert "Resampling observers" in captured.err


def test_default_algorithm(observer):
    population = resample(*observer, n_samples=2)
    assert population.algorithm == "mrg32k3a"
    again = resample(*observer, n_samples=2, algorithm="mrg32k3a", seed=0)
    np.testing.assert_array_equal(population.stack(), again.stack())
