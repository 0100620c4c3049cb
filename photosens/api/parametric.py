"""
Parametric variation of observer sensitivities
"""

from typing import Optional

import numpy as np
from tqdm import tqdm

from photosens.api.assemble import assemble_bundle
from photosens.api.defaults import (
    CONE_LABELS,
    DLENS_SD,
    DMAC_SD,
    DPHOTOPIGMENT_SD,
    LAMBDA_MAX_SHIFT_SD,
)
from photosens.api.domain import as_sampling
from photosens.api.params import nominal_ind_diff_params
from photosens.err import InvalidConfigurationError

# name -> (description, units, standard deviation)
IND_DIFF_PARAMETERS = {
    'dlens': ('Lens density', '%', DLENS_SD),
    'dmac': ('Macular pigment density', '%', DMAC_SD),
}
for _idx, _label in enumerate(CONE_LABELS):
    IND_DIFF_PARAMETERS[f'dphotopigment_{_label}'] = (
        f'{_label} cone photopigment density', '%', DPHOTOPIGMENT_SD[_idx]
    )
    IND_DIFF_PARAMETERS[f'lambda_max_shift_{_label}'] = (
        f'{_label} cone lambda-max shift', 'nm', LAMBDA_MAX_SHIFT_SD[_idx]
    )

# name -> (description, units, default sweep)
OBSERVER_PARAMETERS = {
    'age': ('Age', 'yrs', np.arange(20.0, 81.0, 5.0)),
    'field_size': ('Field size', 'deg', np.arange(1.0, 11.0, 1.0)),
    'pupil_diameter': ('Pupil diameter', 'mm', np.arange(2.0, 9.0, 1.0)),
}

N_SD = 2
N_STEPS = 9


class ParametricVariation:
    """
    Sensitivities along a sweep of a single parameter.

    Attributes
    ----------
    parameter : str
        Name of the varied parameter.
    values : np.ndarray
        Requested parameter values.
    real_values : np.ndarray
        Values actually used by the transform, after clamping.
    labels : list of str
        Short label of each step.
    long_labels : list of str
        Descriptive label of each step.
    bundles : list of SensitivityBundle
        One bundle per step.
    """

    def __init__(self, parameter, values, real_values, labels, long_labels, bundles):
        self.parameter = parameter
        self.values = values
        self.real_values = real_values
        self.labels = labels
        self.long_labels = long_labels
        self.bundles = bundles

    def __len__(self):
        return len(self.bundles)

    def __getitem__(self, key):
        return self.bundles[key]

    def stack(self, name="energy_normalized"):
        """Stack one representation across steps into (n_steps, n_receptors, n_wls)."""
        return np.stack([getattr(bundle, name) for bundle in self.bundles])


def default_values(parameter):
    """
    Default sweep of `parameter`: plus/minus two standard deviations in
    nine steps for individual difference parameters, a fixed range for
    observer parameters.
    """
    if parameter in IND_DIFF_PARAMETERS:
        sd = IND_DIFF_PARAMETERS[parameter][2]
        return np.linspace(-N_SD * sd, N_SD * sd, N_STEPS)
    if parameter in OBSERVER_PARAMETERS:
        return OBSERVER_PARAMETERS[parameter][2].copy()
    raise InvalidConfigurationError(
        f"Unknown parameter {parameter!r}; choose one of "
        f"{sorted(IND_DIFF_PARAMETERS) + sorted(OBSERVER_PARAMETERS)}."
    )


def _set_ind_diff_value(params, parameter, value):
    if parameter in ('dlens', 'dmac'):
        # whole eye properties, shared by all receptor classes
        for record in params.values():
            setattr(record, parameter, value)
        return params
    name, label = parameter.rsplit('_', 1)
    getattr(params['cones'], name)[CONE_LABELS.index(label)] = value
    return params


def _real_value(bundle, parameter, value):
    if parameter in ('dlens', 'dmac'):
        return getattr(bundle.adjusted_params['cones'], parameter)
    if parameter in IND_DIFF_PARAMETERS:
        name, label = parameter.rsplit('_', 1)
        return getattr(bundle.adjusted_params['cones'], name)[CONE_LABELS.index(label)]
    return value


def parametric_variation(
    sampling,
    field_size: float,
    age: float,
    pupil_diameter: float,
    parameter: str,
    values: Optional[np.ndarray] = None,
    verbose: bool = False,
    transforms=None,
) -> ParametricVariation:
    """
    Compute sensitivities while varying one parameter, all others nominal.

    Parameters
    ----------
    sampling : WavelengthSampling or (start, step, count)
        Wavelength sampling.
    field_size : float
        Field size in degrees.
    age : float
        Observer age in years.
    pupil_diameter : float
        Pupil diameter in mm.
    parameter : str
        One of 'dlens', 'dmac', 'dphotopigment_{L,M,S}',
        'lambda_max_shift_{L,M,S}', 'age', 'field_size', 'pupil_diameter'.
    values : array-like, optional
        Values of the sweep. See `default_values` if None.
    verbose : bool, optional
        Whether to show a progress bar, by default False.
    transforms : dict, optional
        Transform for each receptor class, see `assemble_bundle`.

    Returns
    -------
    ParametricVariation
    """
    defaults = default_values(parameter)
    values = defaults if values is None else np.atleast_1d(np.asarray(values, dtype=float))
    sampling = as_sampling(sampling)
    if parameter in IND_DIFF_PARAMETERS:
        description, units, _ = IND_DIFF_PARAMETERS[parameter]
    else:
        description, units, _ = OBSERVER_PARAMETERS[parameter]

    observer = {'field_size': field_size, 'age': age, 'pupil_diameter': pupil_diameter}
    bundles = []
    real_values = []
    for value in tqdm(values, desc=f"Varying {parameter}", disable=not verbose):
        value = float(value)
        params = nominal_ind_diff_params()
        kwargs = dict(observer)
        if parameter in IND_DIFF_PARAMETERS:
            params = _set_ind_diff_value(params, parameter, value)
        else:
            kwargs[parameter] = value
        bundle = assemble_bundle(sampling, params=params, transforms=transforms, **kwargs)
        bundles.append(bundle)
        real_values.append(_real_value(bundle, parameter, value))

    labels = [f"{parameter} = {value:.2f}{units}" for value in values]
    long_labels = [f"{description}: {value:.2f} {units}" for value in values]
    return ParametricVariation(
        parameter, values, np.asarray(real_values), labels, long_labels, bundles
    )
