"""
Analytic human observer model

Computes quantal spectral sensitivities of the human photoreceptors from
the observer's age, pupil diameter and field size, and from a set of
individual difference parameters. The structure follows the CIE 2006
physiological observer: photopigment absorbance turned into absorptance
through the pigment's optical density, filtered by the lens and the
macular pigment. The pigment absorbance is the Govardovskii (2000)
template; lens and macular density spectra are smooth analytic
approximations of the tabulated CIE components.

References
----------
.. [1] CIE (2006). Fundamental chromaticity diagram with physiological axes.
    Part 1. Technical Report 170-1.
.. [2] Asano, Y., Fairchild, M. D., & Blondé, L. (2016).
    Individual colorimetric observer model. PLoS One, 11(2), e0145671.
"""

import warnings
from numbers import Number

import numpy as np

from photosens.api.domain import as_sampling
from photosens.api.filter_templates import (
    SHIFT_TYPES,
    gaussian_template,
    govardovskii2000_template,
)
from photosens.api.params import IndDiffParams
from photosens.api.units.convert import peak_normalize
from photosens.err import TransformError

CONE_LAMBDA_MAX = np.array([558.9, 530.3, 420.7])  # L, M, S
MELANOPSIN_LAMBDA_MAX = 480.0
ROD_LAMBDA_MAX = 500.0

MELANOPSIN_PEAK_DENSITY = 0.015
ROD_PEAK_DENSITY = 0.333
QUANTAL_EFFICIENCY = 0.667

MACULAR_PEAK_WL = 460.0
MACULAR_WIDTH = 25.0

OPEN_PUPIL_LENS_FACTOR = 0.86207
SMALL_PUPIL_MM = 3.0
OPEN_PUPIL_MM = 7.0

# lower bound of every density deviation in %: a density cannot be negative
MIN_DEVIATION = -100.0


def cone_peak_densities(field_size):
    """
    Peak photopigment optical density of the L, M and S cones.
    """
    decay = np.exp(-field_size / 1.333)
    return np.array([
        0.38 + 0.54 * decay,
        0.38 + 0.54 * decay,
        0.30 + 0.45 * decay,
    ])


def lens_density(wavelengths, age, pupil_diameter=SMALL_PUPIL_MM):
    """
    Optical density of the lens and ocular media.

    The age dependent component grows by 2 % per year up to 60 years and
    faster thereafter. For pupils larger than 3 mm the density decreases
    linearly until it reaches the open pupil value at 7 mm.

    Parameters
    ----------
    wavelengths : np.ndarray
        Wavelengths in nm.
    age : float
        Observer age in years.
    pupil_diameter : float, optional
        Pupil diameter in mm, by default 3.

    Returns
    -------
    np.ndarray
        Optical density at each wavelength.
    """
    ocul1 = 1.2 * np.exp(-(wavelengths - 400.0) / 22.0)
    ocul2 = 0.55 * np.exp(-(wavelengths - 400.0) / 30.0)
    if age <= 60:
        age_factor = 1 + 0.02 * (age - 32)
    else:
        age_factor = 1.56 + 0.0667 * (age - 60)
    fraction = np.clip(
        (pupil_diameter - SMALL_PUPIL_MM) / (OPEN_PUPIL_MM - SMALL_PUPIL_MM), 0, 1
    )
    pupil_factor = 1 - fraction * (1 - OPEN_PUPIL_LENS_FACTOR)
    return (ocul1 * age_factor + ocul2) * pupil_factor


def macular_density(wavelengths, field_size):
    """
    Optical density of the macular pigment, peaking at 460 nm.
    """
    peak = 0.485 * np.exp(-field_size / 6.132)
    return peak * gaussian_template(wavelengths, MACULAR_PEAK_WL, MACULAR_WIDTH)


def check_observer(field_size, age, pupil_diameter, error=TransformError):
    """
    Raise `error` unless the observer values lie in the model domain.
    """
    for name, value in [
        ('field_size', field_size), ('age', age), ('pupil_diameter', pupil_diameter)
    ]:
        if not isinstance(value, Number) or not np.isfinite(value):
            raise error(f"`{name}` must be a finite number, got {value!r}.")
    if field_size <= 0:
        raise error(f"`field_size` must be positive, got {field_size}.")
    if pupil_diameter <= 0:
        raise error(f"`pupil_diameter` must be positive, got {pupil_diameter}.")
    if age < 0:
        raise error(f"`age` must be non-negative, got {age}.")


def adjust_params(params, n_pigments):
    """
    Validate individual difference parameters and clamp them to their bounds.

    Returns a new `IndDiffParams`; the input is left untouched.
    A `RuntimeWarning` is issued for each clamped value.
    """
    if params is None:
        return IndDiffParams.zeros(n_pigments, shift_type='linear')
    adjusted = params.copy()
    if adjusted.shift_type is None:
        adjusted.shift_type = 'linear'
    if adjusted.shift_type not in SHIFT_TYPES:
        raise TransformError(
            f"shift_type must be one of {SHIFT_TYPES}, got {adjusted.shift_type!r}."
        )
    for name in ['dphotopigment', 'lambda_max_shift']:
        value = getattr(adjusted, name)
        if value.size != n_pigments:
            raise TransformError(
                f"`{name}` must have {n_pigments} value(s), got {value.size}."
            )
    values = np.concatenate([
        [adjusted.dlens, adjusted.dmac],
        adjusted.dphotopigment,
        adjusted.lambda_max_shift,
    ])
    if not np.all(np.isfinite(values)):
        raise TransformError(f"Individual difference parameters must be finite: {params!r}.")

    for name in ['dlens', 'dmac']:
        value = getattr(adjusted, name)
        if value < MIN_DEVIATION:
            warnings.warn(
                f"`{name}` of {value:.2f}% clamped to {MIN_DEVIATION}%.", RuntimeWarning
            )
            setattr(adjusted, name, MIN_DEVIATION)
    if np.any(adjusted.dphotopigment < MIN_DEVIATION):
        warnings.warn(
            f"`dphotopigment` of {adjusted.dphotopigment} clamped to {MIN_DEVIATION}%.",
            RuntimeWarning,
        )
        adjusted.dphotopigment = np.maximum(adjusted.dphotopigment, MIN_DEVIATION)
    return adjusted


def compute_fundamentals(
    sampling,
    field_size,
    age,
    pupil_diameter,
    lambda_max,
    peak_density,
    params=None,
):
    """
    Compute quantal sensitivities for a set of photopigments.

    Parameters
    ----------
    sampling : WavelengthSampling or (start, step, count)
        Wavelength sampling.
    field_size : float
        Field size in degrees of visual angle.
    age : float
        Observer age in years.
    pupil_diameter : float
        Pupil diameter in mm.
    lambda_max : array-like of shape (n_pigments,)
        Peak absorbance wavelength of each pigment in nm.
    peak_density : array-like of shape (n_pigments,)
        Peak optical density of each pigment.
    params : IndDiffParams, optional
        Individual difference parameters. Standard observer if None.

    Returns
    -------
    T_quantal_absorptions_normalized : np.ndarray of shape (n_pigments, n_wls)
    T_quantal_absorptions : np.ndarray of shape (n_pigments, n_wls)
    T_quantal_isomerizations : np.ndarray of shape (n_pigments, n_wls)
    adjusted_params : IndDiffParams
        The parameters actually used, after clamping.
    """
    sampling = as_sampling(sampling)
    check_observer(field_size, age, pupil_diameter)
    lambda_max = np.atleast_1d(np.asarray(lambda_max, dtype=float))
    peak_density = np.atleast_1d(np.asarray(peak_density, dtype=float))
    adjusted = adjust_params(params, lambda_max.size)

    wls = sampling.wavelengths
    absorbance = govardovskii2000_template(
        wls,
        lambda_max[:, None],
        shift=adjusted.lambda_max_shift[:, None],
        shift_type=adjusted.shift_type,
    )
    # normalize absorbance so that the peak density is exact
    absorbance = absorbance / np.max(
        govardovskii2000_template(
            np.arange(300.0, 800.0, 0.1), lambda_max[:, None],
            shift=adjusted.lambda_max_shift[:, None],
            shift_type=adjusted.shift_type,
        ),
        axis=-1, keepdims=True
    )
    density = peak_density * (1 + adjusted.dphotopigment / 100)
    absorptance = 1 - 10 ** (-density[:, None] * absorbance)

    lens = lens_density(wls, age, pupil_diameter) * (1 + adjusted.dlens / 100)
    macula = macular_density(wls, field_size) * (1 + adjusted.dmac / 100)
    transmittance = 10 ** (-lens - macula)

    T_absorptions = absorptance * transmittance
    T_normalized = peak_normalize(T_absorptions)
    T_isomerizations = T_absorptions * QUANTAL_EFFICIENCY
    return T_normalized, T_absorptions, T_isomerizations, adjusted


def compute_cone_fundamentals(sampling, field_size, age, pupil_diameter, params=None):
    """
    Quantal sensitivities of the L, M and S cones.

    See Also
    --------
    compute_fundamentals
    """
    return compute_fundamentals(
        sampling, field_size, age, pupil_diameter,
        CONE_LAMBDA_MAX, cone_peak_densities(field_size), params,
    )


def compute_melanopsin_fundamental(sampling, field_size, age, pupil_diameter, params=None):
    """
    Quantal sensitivity of melanopsin.

    See Also
    --------
    compute_fundamentals
    """
    return compute_fundamentals(
        sampling, field_size, age, pupil_diameter,
        MELANOPSIN_LAMBDA_MAX, MELANOPSIN_PEAK_DENSITY, params,
    )


def compute_rod_fundamental(sampling, field_size, age, pupil_diameter, params=None):
    """
    Quantal sensitivity of the rods.

    See Also
    --------
    compute_fundamentals
    """
    return compute_fundamentals(
        sampling, field_size, age, pupil_diameter,
        ROD_LAMBDA_MAX, ROD_PEAK_DENSITY, params,
    )


HUMAN_TRANSFORMS = {
    'cones': compute_cone_fundamentals,
    'melanopsin': compute_melanopsin_fundamental,
    'rod': compute_rod_fundamental,
}
"""
Default transform for each receptor class, in row order.
"""
