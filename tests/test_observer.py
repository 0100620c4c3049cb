import warnings

import numpy as np
import pytest

from photosens.api.observer import (
    HUMAN_TRANSFORMS,
    OPEN_PUPIL_LENS_FACTOR,
    adjust_params,
    compute_cone_fundamentals,
    compute_melanopsin_fundamental,
    compute_rod_fundamental,
    cone_peak_densities,
    lens_density,
)
from photosens.api.domain import WavelengthSampling
from photosens.api.params import IndDiffParams
from photosens.err import TransformError


@pytest.fixture
def fine_sampling():
    return WavelengthSampling(380, 1, 401)


def test_cone_output_shapes(observer):
    sampling = observer[0]
    T_norm, T_abs, T_iso, adjusted = compute_cone_fundamentals(*observer)
    for T in [T_norm, T_abs, T_iso]:
        assert T.shape == (3, sampling.count)
    np.testing.assert_allclose(T_norm.max(axis=1), 1.0)
    assert np.all(T_abs > 0)
    assert np.all(T_abs < 1)
    assert isinstance(adjusted, IndDiffParams)
    assert adjusted.shift_type == 'linear'


@pytest.mark.parametrize("transform", [compute_melanopsin_fundamental, compute_rod_fundamental])
def test_single_row_outputs(observer, transform):
    T_norm, T_abs, T_iso, adjusted = transform(*observer)
    assert T_norm.shape == (1, observer[0].count)
    assert T_abs.shape == T_iso.shape == T_norm.shape
    np.testing.assert_array_equal(adjusted.dphotopigment, [0.0])


def test_cone_peaks_ordered(fine_sampling):
    T_norm, _, _, _ = compute_cone_fundamentals(fine_sampling, 10, 32, 3)
    peaks = fine_sampling.wavelengths[np.argmax(T_norm, axis=1)]
    # L > M > S
    assert peaks[0] > peaks[1] > peaks[2]


def test_isomerizations_proportional_to_absorptions(observer):
    _, T_abs, T_iso, _ = compute_cone_fundamentals(*observer)
    ratio = T_iso / T_abs
    np.testing.assert_allclose(ratio, ratio[0, 0])


def test_zero_params_match_standard_observer(observer):
    nominal = compute_cone_fundamentals(*observer)
    zero = compute_cone_fundamentals(*observer, IndDiffParams.zeros(3, shift_type='linear'))
    for a, b in zip(nominal[:3], zero[:3]):
        np.testing.assert_allclose(a, b)


def test_lambda_max_shift_moves_peak(fine_sampling):
    T_norm, _, _, _ = compute_cone_fundamentals(fine_sampling, 10, 32, 3)
    params = IndDiffParams(lambda_max_shift=[10.0, 0.0, 0.0], dphotopigment=[0, 0, 0])
    T_shift, _, _, _ = compute_cone_fundamentals(fine_sampling, 10, 32, 3, params)
    wls = fine_sampling.wavelengths
    assert wls[np.argmax(T_shift[0])] > wls[np.argmax(T_norm[0])]
    np.testing.assert_allclose(T_shift[1:], T_norm[1:])


def test_age_reduces_short_wavelength_sensitivity(observer):
    sampling = observer[0]
    _, young, _, _ = compute_cone_fundamentals(sampling, 10, 20, 3)
    _, old, _, _ = compute_cone_fundamentals(sampling, 10, 70, 3)
    assert np.all(old[2] < young[2])


def test_lens_density_pupil():
    wls = np.arange(380.0, 781.0, 10.0)
    small = lens_density(wls, 32, 3)
    np.testing.assert_allclose(lens_density(wls, 32, 2), small)
    np.testing.assert_allclose(lens_density(wls, 32, 7), small * OPEN_PUPIL_LENS_FACTOR)
    np.testing.assert_allclose(lens_density(wls, 32, 9), small * OPEN_PUPIL_LENS_FACTOR)
    assert np.all(lens_density(wls, 32, 5) < small)


def test_cone_peak_densities_decrease_with_field_size():
    assert np.all(cone_peak_densities(10) < cone_peak_densities(2))
    densities = cone_peak_densities(2)
    assert densities[0] == densities[1] > densities[2]


def test_photopigment_density_increases_absorption(observer):
    _, nominal, _, _ = compute_cone_fundamentals(*observer)
    params = IndDiffParams(dphotopigment=[20.0, 0.0, 0.0], lambda_max_shift=[0, 0, 0])
    _, dense, _, _ = compute_cone_fundamentals(*observer, params)
    assert np.all(dense[0] > nominal[0])
    np.testing.assert_allclose(dense[1:], nominal[1:])


def test_clamping(observer):
    params = IndDiffParams(
        dlens=-150.0, dmac=-120.0,
        dphotopigment=[-130.0, 0.0, 0.0], lambda_max_shift=[0.0, 0.0, 0.0],
    )
    with pytest.warns(RuntimeWarning):
        _, T_abs, _, adjusted = compute_cone_fundamentals(*observer, params)
    assert adjusted.dlens == -100.0
    assert adjusted.dmac == -100.0
    np.testing.assert_array_equal(adjusted.dphotopigment, [-100.0, 0.0, 0.0])
    # the input is left untouched
    assert params.dlens == -150.0
    # no photopigment left in the L cones
    np.testing.assert_allclose(T_abs[0], 0.0)


def test_no_warning_without_clamping(observer):
    with warnings.catch_warnings():
        warnings.simplefilter("error", RuntimeWarning)
        compute_cone_fundamentals(*observer, IndDiffParams(
            dlens=30.0, dmac=-40.0, dphotopigment=[5, 5, 5], lambda_max_shift=[1, 1, 1]
        ))


@pytest.mark.parametrize("field_size, age, pupil_diameter", [
    (-1.0, 32.0, 3.0),
    (10.0, -5.0, 3.0),
    (10.0, 32.0, 0.0),
    (10.0, np.nan, 3.0),
])
def test_invalid_observer(sampling, field_size, age, pupil_diameter):
    with pytest.raises(TransformError):
        compute_cone_fundamentals(sampling, field_size, age, pupil_diameter)


def test_invalid_params():
    with pytest.raises(TransformError):
        adjust_params(IndDiffParams(dphotopigment=[0, 0], lambda_max_shift=[0, 0, 0]), 3)
    with pytest.raises(TransformError):
        adjust_params(IndDiffParams.zeros(3, shift_type='quadratic'), 3)
    with pytest.raises(TransformError):
        adjust_params(IndDiffParams(dlens=np.inf, dphotopigment=[0] * 3, lambda_max_shift=[0] * 3), 3)


def test_human_transforms():
    assert list(HUMAN_TRANSFORMS) == ['cones', 'melanopsin', 'rod']
