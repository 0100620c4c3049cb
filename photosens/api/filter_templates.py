"""
Photopigment absorbance and pigment density templates
"""

from typing import Union

import numpy as np
from scipy.stats import norm

# alpha band constants of Govardovskii et al. (2000)
_A, _B, _C, _D = 69.7, 28.0, -14.9, 0.674
_b, _c = 0.922, 1.104
# beta band constants
_A_BETA = 0.26

SHIFT_TYPES = ("linear", "log")


def gaussian_template(
    wavelengths: np.ndarray,
    mean: Union[float, np.ndarray],
    std: Union[float, np.ndarray] = 30.0,
) -> np.ndarray:
    """
    Create Gaussian template normalized to the max.

    Parameters
    ----------
    wavelengths : np.ndarray
        The wavelength array.
    mean : Union[float, np.ndarray]
        The peak wavelength of each template.
    std : Union[float, np.ndarray], optional
        The standard deviation of each template, default is 30.

    Returns
    -------
    np.ndarray
        The templates as a numpy ndarray.
    """
    y = norm.pdf(wavelengths, mean, std)
    return y / np.max(y, axis=-1, keepdims=True)


def govardovskii2000_template(
    wavelengths: np.ndarray,
    alpha_max: Union[float, np.ndarray],
    shift: Union[float, np.ndarray] = 0.0,
    shift_type: str = "linear",
) -> np.ndarray:
    """
    Calculate photopigment absorbance according to Govardovskii et al (2000).

    Parameters
    ----------
    wavelengths : np.ndarray
        The wavelength array in nm.
    alpha_max : Union[float, np.ndarray]
        The wavelength peak of each pigment. Use `alpha_max[:, None]` to
        obtain one row per pigment.
    shift : Union[float, np.ndarray], optional
        Shift of the absorbance peak in nm, by default 0.
    shift_type : {'linear', 'log'}, optional
        With 'linear', the whole curve is translated along the wavelength axis.
        With 'log', the curve is translated along the log-wavelength axis so
        that its peak moves by `shift` nm. By default 'linear'.

    Returns
    -------
    templates : np.ndarray of shape (n_pigments, n_wls)
        Absorbance normalized to approximately one at the peak.

    References
    ----------
    .. [1] Govardovskii, V. I., Fyhrquist, N., Reuter, T., Kuzmin, D. G., & Donner, K.
        In search of the visual pigment template.
        Visual neuroscience, 17(4), 509-528, 2000.
    """
    if shift_type == "linear":
        wavelengths = wavelengths - shift
    elif shift_type == "log":
        wavelengths = wavelengths * alpha_max / (alpha_max + shift)
    else:
        raise ValueError(f"shift_type must be one of {SHIFT_TYPES}, got {shift_type!r}.")

    x = alpha_max / wavelengths
    a = 0.8795 + 0.0459 * np.exp(-((alpha_max - 300.0) ** 2) / 11940.0)
    alpha_band = 1 / (
        np.exp(_A * (a - x))
        + np.exp(_B * (_b - x))
        + np.exp(_C * (_c - x))
        + _D
    )

    beta_max = 189.0 + 0.315 * alpha_max
    d_beta = -40.5 + 0.195 * alpha_max
    beta_band = np.exp(-(((wavelengths - beta_max) / d_beta) ** 2))

    return alpha_band + _A_BETA * beta_band
