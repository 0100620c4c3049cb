"""
Receptor objects holding observer parameters and their sensitivities
"""

import hashlib
from abc import ABC, abstractmethod

import numpy as np
import seaborn as sns

from photosens.api.assemble import MATRIX_NAMES, assemble_bundle
from photosens.api.defaults import (
    DEFAULT_AGE,
    DEFAULT_ALGORITHM,
    DEFAULT_FIELD_SIZE,
    DEFAULT_N_SAMPLES,
    DEFAULT_PUPIL_DIAMETER,
    DEFAULT_SAMPLING,
    DEFAULT_SEED,
    RECEPTOR_LABELS,
)
from photosens.api.domain import as_sampling
from photosens.api.observer import HUMAN_TRANSFORMS, check_observer
from photosens.api.parametric import parametric_variation
from photosens.api.plotting.basic import population_plot, sensitivity_plot
from photosens.api.resampling import resample
from photosens.err import InvalidConfigurationError


class BaseReceptor(ABC):
    """
    Abstract receptor model.

    Subclasses build nominal, stochastic and parametric sensitivities;
    plotting and hashing are shared.

    Parameters
    ----------
    sampling : WavelengthSampling or (start, step, count), optional
        Wavelength sampling, by default (380, 2, 201).
    labels : sequence of str, optional
        Receptor labels in row order.
    verbose : bool, optional
        Whether to show progress bars, by default False.
    """

    def __init__(self, sampling=DEFAULT_SAMPLING, labels=RECEPTOR_LABELS, verbose=False):
        self._sampling = as_sampling(sampling)
        self.labels = tuple(labels)
        self.verbose = verbose
        self.nominal = None
        self.stochastic = None
        self.parametric = None
        self.md5_hash = None

    @property
    def sampling(self):
        return self._sampling

    @property
    def wavelengths(self):
        return self._sampling.wavelengths

    @abstractmethod
    def make_nominal(self):
        pass

    @abstractmethod
    def make_stochastic(self, n_samples=DEFAULT_N_SAMPLES, **kwargs):
        pass

    @abstractmethod
    def make_parametric(self, parameter, values=None):
        pass

    def _hash_items(self):
        yield repr(self._sampling.as_tuple()).encode()
        if self.nominal is not None:
            for name in MATRIX_NAMES:
                yield np.ascontiguousarray(getattr(self.nominal, name)).tobytes()
        if self.stochastic is not None:
            for name in MATRIX_NAMES:
                yield np.ascontiguousarray(self.stochastic.stack(name)).tobytes()

    def compute_hash(self):
        """
        MD5 checksum of the receptor object.

        Useful to check the integrity of a specific resampled population.
        The digest is stored in `md5_hash` and returned.
        """
        md5 = hashlib.md5()
        for item in self._hash_items():
            md5.update(item)
        self.md5_hash = md5.hexdigest()
        return self.md5_hash

    def plot(self, which='nominal', name='energy_normalized', ax=None, receptor=0, **kwargs):
        """
        Plot the spectral sensitivities.

        Parameters
        ----------
        which : {'nominal', 'stochastic', 'parametric'}, optional
            Which sensitivities to plot, by default 'nominal'.
        name : str, optional
            Representation to plot, by default 'energy_normalized'.
        ax : plt.Axes, optional
            Matplotlib axes object to plot on, by default None.
        receptor : int or str, optional
            Receptor to plot for a parametric variation, by default 0.

        Returns
        -------
        plt.Axes
        """
        if name not in MATRIX_NAMES:
            raise InvalidConfigurationError(f"`name` must be one of {MATRIX_NAMES}, got {name!r}.")
        if which == 'nominal':
            return sensitivity_plot(
                self.wavelengths, getattr(self.nominal, name), list(self.labels), ax=ax, **kwargs
            )
        if which == 'stochastic':
            if self.stochastic is None:
                raise InvalidConfigurationError("No stochastic sensitivities; call `make_stochastic` first.")
            return population_plot(
                self.wavelengths, self.stochastic.stack(name), list(self.labels), ax=ax, **kwargs
            )
        if which == 'parametric':
            if self.parametric is None:
                raise InvalidConfigurationError("No parametric variation; call `make_parametric` first.")
            idx = self.labels.index(receptor) if isinstance(receptor, str) else receptor
            Ts = self.parametric.stack(name)[:, idx]
            colors = sns.color_palette("viridis", Ts.shape[0])
            ax = sensitivity_plot(
                self.wavelengths, Ts, self.parametric.long_labels, colors, ax=ax, **kwargs
            )
            ax.set_title(self.labels[idx])
            return ax
        raise InvalidConfigurationError(
            f"`which` must be 'nominal', 'stochastic' or 'parametric', got {which!r}."
        )


class HumanReceptor(BaseReceptor):
    """
    Human photoreceptor spectral sensitivities.

    Nominal sensitivities are computed at instantiation and stored in
    `nominal`. `make_stochastic` and `make_parametric` populate
    `stochastic` and `parametric`.

    Parameters
    ----------
    age : float, optional
        Observer age in years, by default 32.
    pupil_diameter : float, optional
        Pupil diameter in mm, by default 3.
    field_size : float, optional
        Field size in degrees, by default 10.
    sampling : WavelengthSampling or (start, step, count), optional
        Wavelength sampling, by default (380, 2, 201).
    verbose : bool, optional
        Whether to show progress bars, by default False.
    transforms : dict, optional
        Transform for the 'cones', 'melanopsin' and 'rod' classes,
        by default `HUMAN_TRANSFORMS`.

    Raises
    ------
    InvalidConfigurationError
        If the sampling or the observer values are invalid.

    Notes
    -----
    Penumbral cones, the cones lying in the shadow of the retinal blood
    vessels, are not modeled; no hemoglobin transmittance is applied.

    Examples
    --------
    >>> receptor = HumanReceptor(age=45)
    >>> population = receptor.make_stochastic(n_samples=100)
    >>> population.stack('energy_normalized').shape
    (100, 5, 201)
    """

    def __init__(
        self,
        age=DEFAULT_AGE,
        pupil_diameter=DEFAULT_PUPIL_DIAMETER,
        field_size=DEFAULT_FIELD_SIZE,
        sampling=DEFAULT_SAMPLING,
        verbose=False,
        transforms=None,
    ):
        super().__init__(sampling=sampling, labels=RECEPTOR_LABELS, verbose=verbose)
        check_observer(field_size, age, pupil_diameter, error=InvalidConfigurationError)
        self._age = age
        self._pupil_diameter = pupil_diameter
        self._field_size = field_size
        self._transforms = HUMAN_TRANSFORMS if transforms is None else transforms
        self.nominal = self.make_nominal()

    @property
    def age(self):
        return self._age

    @property
    def pupil_diameter(self):
        return self._pupil_diameter

    @property
    def field_size(self):
        return self._field_size

    @property
    def _observer(self):
        return (self._sampling, self._field_size, self._age, self._pupil_diameter)

    def make_nominal(self):
        """
        Sensitivities of the standard observer with the object's age,
        pupil diameter and field size.
        """
        return assemble_bundle(*self._observer, transforms=self._transforms)

    def make_stochastic(
        self,
        n_samples=DEFAULT_N_SAMPLES,
        algorithm=DEFAULT_ALGORITHM,
        seed=DEFAULT_SEED,
        n_jobs=None,
    ):
        """
        Resample the sensitivities using the population variability of the
        individual difference parameters.

        Melanopsin and rod sensitivities are not resampled beyond the
        shared lens and macular variation. The result replaces `stochastic`
        only if every draw succeeds.

        See Also
        --------
        photosens.api.resampling.resample
        """
        population = resample(
            *self._observer,
            n_samples=n_samples,
            algorithm=algorithm,
            seed=seed,
            verbose=self.verbose,
            n_jobs=n_jobs,
            transforms=self._transforms,
        )
        self.stochastic = population
        return population

    def make_parametric(self, parameter, values=None):
        """
        Vary a single parameter with all others at their nominal value.

        See Also
        --------
        photosens.api.parametric.parametric_variation
        """
        variation = parametric_variation(
            *self._observer,
            parameter=parameter,
            values=values,
            verbose=self.verbose,
            transforms=self._transforms,
        )
        self.parametric = variation
        return variation

    def _hash_items(self):
        yield repr((self._age, self._pupil_diameter, self._field_size)).encode()
        yield from super()._hash_items()

    def __repr__(self):
        return (
            f"{type(self).__name__}(age={self._age}, pupil_diameter={self._pupil_diameter}, "
            f"field_size={self._field_size}, sampling={self._sampling!r})"
        )
