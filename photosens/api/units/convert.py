"""
Convert units
"""

import numpy as np
from photosens.api.units.registry import ureg
from photosens.api.domain import as_sampling


def has_units(obj):
    """
    Check if object has units via duck-typing.
    """
    return (
        hasattr(obj, "units") and hasattr(obj, "to") and hasattr(obj, "magnitude")
    )


def optional_to(obj, units, *args, **kwargs):
    """
    Optionally convert to `units` if `obj` is a pint.Quantity
    and return numeric value or np.ndarray object.
    """
    if has_units(obj):
        if units is None:
            obj = obj.magnitude
        else:
            obj = obj.to(units, *args, **kwargs).magnitude
    return obj


def quanta_per_energy(wavelengths, return_units=False):
    """
    Number of photons per joule of radiant energy at each wavelength.

    Parameters
    ----------
    wavelengths : float or array-like
        Wavelengths in nanometer or a `pint.Quantity` convertible to nanometer.
    return_units : bool, optional
        Whether to return a `pint.Quantity` instead of a `numpy.ndarray`.

    Returns
    -------
    factor : numpy.ndarray or pint.Quantity
        The conversion factor lambda / (h * c) in 1/J.
    """
    wavelengths = np.asarray(optional_to(wavelengths, "nm")) * ureg("nm")
    factor = (wavelengths / (ureg.planck_constant * ureg.speed_of_light)).to("1/J")
    if return_units:
        return factor
    return factor.magnitude


def quantal_to_energy(sampling, T_quantal):
    """
    Convert spectral sensitivities from quantal to energy units.

    A sensitivity per absorbed photon becomes a sensitivity per unit
    radiant energy by multiplying with the number of photons per joule
    at each wavelength.

    Parameters
    ----------
    sampling : WavelengthSampling or (start, step, count)
        Wavelength sampling of the columns of `T_quantal`.
    T_quantal : array-like of shape (n_receptors, n_wls)
        Sensitivities in quantal units.

    Returns
    -------
    T_energy : numpy.ndarray of shape (n_receptors, n_wls)
        Sensitivities in energy units.
    """
    sampling = as_sampling(sampling)
    T_quantal = np.atleast_2d(np.asarray(T_quantal, dtype=float))
    if T_quantal.shape[-1] != sampling.count:
        raise ValueError(
            f"Number of columns ({T_quantal.shape[-1]}) does not match "
            f"the wavelength count ({sampling.count})."
        )
    return T_quantal * quanta_per_energy(sampling.wavelengths)


def peak_normalize(T):
    """
    Divide each row by its own maximum.

    Rows whose maximum is zero or negative are not guarded against and
    produce non-finite or sign-flipped values.

    Parameters
    ----------
    T : array-like of shape (n_receptors, n_wls)

    Returns
    -------
    numpy.ndarray of shape (n_receptors, n_wls)
    """
    T = np.atleast_2d(np.asarray(T, dtype=float))
    with np.errstate(divide="ignore", invalid="ignore"):
        return T / np.max(T, axis=1, keepdims=True)
