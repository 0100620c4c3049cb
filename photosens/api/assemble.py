"""
Assembly of multi-receptor sensitivity bundles
"""

from typing import Dict, Optional

import numpy as np

from photosens.api.defaults import RECEPTOR_CLASSES, RECEPTOR_LABELS
from photosens.api.domain import as_sampling
from photosens.api.observer import HUMAN_TRANSFORMS
from photosens.api.params import IndDiffParams, nominal_ind_diff_params
from photosens.api.units.convert import peak_normalize, quantal_to_energy

MATRIX_NAMES = (
    "quantal_isomerizations",
    "quantal_absorptions",
    "quantal_absorptions_normalized",
    "energy",
    "energy_normalized",
)


class SensitivityBundle:
    """
    Spectral sensitivities of all receptor classes of one observer.

    Every matrix has shape (n_receptors, n_wls) with rows ordered as
    `labels`: L, M and S cones, melanopsin, rod.

    Attributes
    ----------
    quantal_isomerizations : np.ndarray
    quantal_absorptions : np.ndarray
        Raw absorptions for the cone rows. The melanopsin and rod rows
        hold the peak normalized absorptions.
    quantal_absorptions_normalized : np.ndarray
    energy : np.ndarray
        Energy unit sensitivities derived from the normalized quantal ones.
    energy_normalized : np.ndarray
    ind_diff_params : dict
        Individual difference parameters per receptor class.
    adjusted_params : dict
        Parameters per receptor class after clamping by the transform.
    labels : tuple of str
    """

    def __init__(
        self,
        quantal_isomerizations,
        quantal_absorptions,
        quantal_absorptions_normalized,
        energy,
        energy_normalized,
        ind_diff_params,
        adjusted_params,
        labels=RECEPTOR_LABELS,
    ):
        self.quantal_isomerizations = quantal_isomerizations
        self.quantal_absorptions = quantal_absorptions
        self.quantal_absorptions_normalized = quantal_absorptions_normalized
        self.energy = energy
        self.energy_normalized = energy_normalized
        self.ind_diff_params = ind_diff_params
        self.adjusted_params = adjusted_params
        self.labels = tuple(labels)

    @property
    def shape(self):
        return self.quantal_isomerizations.shape

    def matrices(self):
        """Return the five matrices keyed by name."""
        return {name: getattr(self, name) for name in MATRIX_NAMES}

    def __repr__(self):
        return f"{type(self).__name__}(shape={self.shape}, labels={self.labels})"


def assemble_bundle(
    sampling,
    field_size: float,
    age: float,
    pupil_diameter: float,
    params: Optional[Dict[str, IndDiffParams]] = None,
    transforms=None,
) -> SensitivityBundle:
    """
    Compute all sensitivity representations for one set of parameters.

    Parameters
    ----------
    sampling : WavelengthSampling or (start, step, count)
        Wavelength sampling shared by every receptor class.
    field_size : float
        Field size in degrees.
    age : float
        Observer age in years.
    pupil_diameter : float
        Pupil diameter in mm.
    params : dict, optional
        `IndDiffParams` for the 'cones', 'melanopsin' and 'rod' classes.
        Standard observer if None.
    transforms : dict, optional
        Transform callable for each receptor class with signature
        ``transform(sampling, field_size, age, pupil_diameter, params)``
        returning ``(normalized, absorptions, isomerizations, adjusted)``.
        Defaults to `HUMAN_TRANSFORMS`.

    Returns
    -------
    SensitivityBundle
    """
    sampling = as_sampling(sampling)
    transforms = HUMAN_TRANSFORMS if transforms is None else transforms
    params = nominal_ind_diff_params() if params is None else params

    outputs = {
        name: transforms[name](sampling, field_size, age, pupil_diameter, params[name])
        for name in RECEPTOR_CLASSES
    }
    cones, mel, rod = (outputs[name] for name in RECEPTOR_CLASSES)

    T_isomerizations = np.vstack([cones[2], mel[2], rod[2]])
    T_normalized = np.vstack([cones[0], mel[0], rod[0]])
    # melanopsin and rod rows take the normalized absorptions
    T_absorptions = np.vstack([cones[1], mel[0], rod[0]])

    T_energy = quantal_to_energy(sampling, T_normalized)
    T_energy_normalized = peak_normalize(T_energy)

    return SensitivityBundle(
        T_isomerizations,
        T_absorptions,
        T_normalized,
        T_energy,
        T_energy_normalized,
        ind_diff_params=params,
        adjusted_params={name: outputs[name][3] for name in RECEPTOR_CLASSES},
    )
